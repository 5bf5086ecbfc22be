from functools import partial
from typing import List

from PySide6 import QtWidgets

from core.listing import ListController
from models.user import Role
from services import gym_service
from ui.context import AppContext
from ui.dialogs.gym_dialog import GymDialog
from ui.widgets.list_page import Action, ListPage

SUPERADMIN_REQUIRED = "Superadmin access required"


class GymsPage(ListPage):
    title = "🏢 Gyms"
    resource = "gyms"
    columns = ["Name", "Contact Email", "Phone", "Address", "Status"]
    search_placeholder = "Search by name or email"
    add_label = "Add Gym"

    def __init__(self, ctx: AppContext, parent=None):
        controller = ListController(
            loader=partial(gym_service.list_gyms, ctx.client),
            deleter=partial(gym_service.delete_gym, ctx.client),
            search_fields=lambda g: (g.name, g.contact_email, g.contact_phone),
            alerts=ctx.alerts,
            user=ctx.user,
            modify_roles=(Role.SUPERADMIN,),
            messages={"deleted": "Gym deleted successfully", "forbidden": SUPERADMIN_REQUIRED},
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def showEvent(self, event) -> None:
        # Gyms are never fetched for anyone below superadmin
        if not (self.ctx.user and self.ctx.user.is_superadmin):
            QtWidgets.QWidget.showEvent(self, event)
            self.ctx.alerts.set_alert(SUPERADMIN_REQUIRED, "error")
            return
        super().showEvent(event)

    def on_add(self) -> None:
        self.open_dialog(None)

    def open_dialog(self, gym) -> None:
        dlg = GymDialog(self.ctx, gym, self)
        if dlg.exec() == GymDialog.Accepted:
            self.controller.load()

    def row_values(self, g) -> List[str]:
        return [g.name, g.contact_email, g.contact_phone, str(g.address) or "N/A",
                "Active" if g.is_active else "Inactive"]

    def row_actions(self, g) -> List[Action]:
        if not self.controller.can_modify:
            return []
        return [
            ("Edit", lambda: self.open_dialog(g)),
            ("Delete", lambda: self.controller.request_delete(g)),
        ]

    def describe(self, g) -> str:
        return f"the gym '{g.name}'"
