from functools import partial
from typing import Any, Dict

from PySide6 import QtWidgets

from core.forms import FormController
from core.routes import Route
from core.utils import capitalize_words
from core.validators import validate_membership
from models.membership import DURATION_UNITS, Membership
from services import membership_service
from ui.context import AppContext
from ui.widgets.detail_page import DetailPage


class MembershipDetailPage(DetailPage):
    resource = "memberships"
    singular = "Membership"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_membership,
            create=partial(membership_service.create_membership, ctx.client),
            update=partial(membership_service.update_membership, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Membership created successfully",
                "updated": "Membership updated successfully",
                "not_found": "Membership not found",
            },
            navigate_to=lambda: ctx.navigate("memberships"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(membership_service.delete_membership, ctx.client), parent)

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        grp = QtWidgets.QGroupBox("Membership Plan")
        form = QtWidgets.QFormLayout(grp)

        self.name = QtWidgets.QLineEdit()
        self.name.textEdited.connect(self.field_edited("name"))
        form.addRow("Name *", self.errors.wrap("name", self.name))

        self.description = QtWidgets.QPlainTextEdit()
        self.description.setFixedHeight(80)
        self.description.textChanged.connect(self.field_edited("description"))
        form.addRow("Description *", self.errors.wrap("description", self.description))

        self.price = QtWidgets.QDoubleSpinBox()
        self.price.setRange(0, 10_000_000)
        self.price.setDecimals(2)
        self.price.setPrefix("Rs. ")
        self.price.valueChanged.connect(self.field_edited("price"))
        form.addRow("Price *", self.errors.wrap("price", self.price))

        self.duration_value = QtWidgets.QSpinBox()
        self.duration_value.setRange(0, 1000)
        self.duration_value.setValue(1)
        self.duration_value.valueChanged.connect(self.field_edited("durationValue"))
        self.duration_unit = QtWidgets.QComboBox()
        for u in DURATION_UNITS:
            self.duration_unit.addItem(capitalize_words(u), u)
        self.duration_unit.setCurrentIndex(self.duration_unit.findData("months"))
        self.duration_unit.currentIndexChanged.connect(self.field_edited("durationUnit"))
        duration = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(duration)
        h.setContentsMargins(0, 0, 0, 0)
        h.addWidget(self.errors.wrap("durationValue", self.duration_value))
        h.addWidget(self.errors.wrap("durationUnit", self.duration_unit))
        form.addRow("Duration *", duration)

        self.features = QtWidgets.QLineEdit()
        self.features.setPlaceholderText("Comma separated, e.g. Locker, Sauna")
        form.addRow("Features", self.features)

        self.classes = QtWidgets.QSpinBox()
        self.classes.setRange(0, 1000)
        form.addRow("Classes Included", self.classes)

        self.personal_training = QtWidgets.QSpinBox()
        self.personal_training.setRange(0, 1000)
        form.addRow("PT Sessions Included", self.personal_training)

        self.discounts = QtWidgets.QDoubleSpinBox()
        self.discounts.setRange(0, 100)
        self.discounts.setSuffix(" %")
        form.addRow("Discount", self.discounts)

        self.active = QtWidgets.QCheckBox("Active")
        self.active.setChecked(True)
        form.addRow("", self.active)
        layout.addWidget(grp)

    def fetch(self) -> Membership:
        return membership_service.get_membership(self.ctx.client, self.route.record_id)

    def fill(self, m: Membership) -> None:
        self.name.setText(m.name)
        self.description.setPlainText(m.description)
        self.price.setValue(float(m.price or 0))
        self.duration_value.setValue(m.duration_value or 0)
        self.duration_unit.setCurrentIndex(max(self.duration_unit.findData(m.duration_unit), 0))
        self.features.setText(", ".join(m.features))
        self.classes.setValue(m.classes_included)
        self.personal_training.setValue(m.personal_training_included)
        self.discounts.setValue(float(m.discounts))
        self.active.setChecked(m.is_active)
        self.title.setText(f"{self.title.text()} - {m.name}")

    def payload(self) -> Dict[str, Any]:
        return Membership(
            id=self.route.record_id,
            name=self.name.text().strip(),
            description=self.description.toPlainText().strip(),
            price=self.price.value(),
            duration_value=self.duration_value.value(),
            duration_unit=self.duration_unit.currentData(),
            features=[f.strip() for f in self.features.text().split(",") if f.strip()],
            classes_included=self.classes.value(),
            personal_training_included=self.personal_training.value(),
            discounts=self.discounts.value(),
            is_active=self.active.isChecked(),
        ).to_payload()

    def describe(self) -> str:
        return f"the membership '{self.name.text()}'"
