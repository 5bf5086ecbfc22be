import sys

from ui.main_window import GymApp

"""
Entry point for the SOLID GYM client.
Run this file (or the solidgym-client command) to start the application.
"""


def main() -> int:
    # Create the Application instance
    app = GymApp(sys.argv)

    # Restores the saved session or asks for a login
    if not app.start():
        return 0

    # Start the event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
