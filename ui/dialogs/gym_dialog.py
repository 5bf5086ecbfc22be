from functools import partial
from typing import Any, Dict, Optional

from PySide6 import QtWidgets

from core.forms import FormController
from core.routes import FormMode
from core.validators import validate_gym
from models.gym import Gym
from services import gym_service
from ui.context import AppContext
from ui.widgets.form_fields import ErrorLabels


class GymDialog(QtWidgets.QDialog):
    """
    Create/edit form for a gym tenant. Closes itself once the backend accepted the save.
    """
    def __init__(self, ctx: AppContext, gym: Optional[Gym] = None, parent=None):
        super().__init__(parent)
        self.gym = gym
        self.form = FormController(
            FormMode.EDIT if gym else FormMode.CREATE,
            validator=validate_gym,
            create=partial(gym_service.create_gym, ctx.client),
            update=partial(gym_service.update_gym, ctx.client),
            alerts=ctx.alerts,
            record_id=gym.id if gym else None,
            messages={"created": "Gym created successfully", "updated": "Gym updated successfully"},
            runner=ctx.runner,
            parent=self,
        )
        self.setWindowTitle("Edit Gym" if gym else "Add Gym")
        self.setModal(True)
        self.resize(520, 560)
        self.init_ui()
        if gym:
            self.fill(gym)

    def init_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()
        self.errors = ErrorLabels()

        self.name = QtWidgets.QLineEdit()
        self.description = QtWidgets.QPlainTextEdit()
        self.description.setFixedHeight(70)
        self.email = QtWidgets.QLineEdit()
        self.phone = QtWidgets.QLineEdit()
        self.website = QtWidgets.QLineEdit()
        self.street = QtWidgets.QLineEdit()
        self.city = QtWidgets.QLineEdit()
        self.state = QtWidgets.QLineEdit()
        self.zip_code = QtWidgets.QLineEdit()
        self.country = QtWidgets.QLineEdit()

        form.addRow("Name *", self.errors.wrap("name", self.name))
        form.addRow("Description", self.description)
        form.addRow("Contact Email *", self.errors.wrap("contactEmail", self.email))
        form.addRow("Contact Phone", self.phone)
        form.addRow("Website", self.website)
        form.addRow(QtWidgets.QLabel("Address"))
        form.addRow("Street", self.street)
        form.addRow("City", self.city)
        form.addRow("State", self.state)
        form.addRow("Zip Code", self.zip_code)
        form.addRow("Country", self.country)
        layout.addLayout(form)

        self.name.textEdited.connect(lambda _: self.form.clear_error("name"))
        self.email.textEdited.connect(lambda _: self.form.clear_error("contactEmail"))
        self.form.errors_changed.connect(self.errors.show)
        self.form.saved.connect(lambda _: self.accept())
        self.form.busy_changed.connect(lambda busy: self.buttons.setEnabled(not busy))

        btns = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel)
        btns.accepted.connect(self.on_save)
        btns.rejected.connect(self.reject)
        self.buttons = btns
        layout.addWidget(btns)

    def fill(self, gym: Gym) -> None:
        self.name.setText(gym.name)
        self.description.setPlainText(gym.description)
        self.email.setText(gym.contact_email)
        self.phone.setText(gym.contact_phone)
        self.website.setText(gym.website)
        self.street.setText(gym.address.street)
        self.city.setText(gym.address.city)
        self.state.setText(gym.address.state)
        self.zip_code.setText(gym.address.zip_code)
        self.country.setText(gym.address.country)

    def payload(self) -> Dict[str, Any]:
        return {
            "name": self.name.text().strip(),
            "description": self.description.toPlainText().strip(),
            "contactEmail": self.email.text().strip(),
            "contactPhone": self.phone.text().strip(),
            "website": self.website.text().strip(),
            "address": {
                "street": self.street.text().strip(),
                "city": self.city.text().strip(),
                "state": self.state.text().strip(),
                "zipCode": self.zip_code.text().strip(),
                "country": self.country.text().strip(),
            },
        }

    def on_save(self) -> None:
        self.form.submit(self.payload())
