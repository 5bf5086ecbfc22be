from functools import partial
from typing import Any, Dict, List

from PySide6 import QtWidgets

from core.forms import FormController
from core.routes import Route
from core.utils import humanize
from core.validators import validate_class
from models.gym_class import CATEGORIES, DIFFICULTIES, GymClass
from services import class_service
from ui.context import AppContext
from ui.widgets.detail_page import DetailPage


class ClassDetailPage(DetailPage):
    resource = "classes"
    singular = "Class"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_class,
            create=partial(class_service.create_class, ctx.client),
            update=partial(class_service.update_class, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Class created successfully",
                "updated": "Class updated successfully",
                "not_found": "Class not found",
            },
            navigate_to=lambda: ctx.navigate("classes"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(class_service.delete_class, ctx.client), parent)
        self.ctx.run(partial(class_service.list_instructors, ctx.client), self.show_instructors, owner=self)

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        grp = QtWidgets.QGroupBox("Class Information")
        form = QtWidgets.QFormLayout(grp)

        self.name = QtWidgets.QLineEdit()
        self.name.textEdited.connect(self.field_edited("name"))
        form.addRow("Class Name *", self.errors.wrap("name", self.name))

        self.description = QtWidgets.QPlainTextEdit()
        self.description.setFixedHeight(80)
        form.addRow("Description", self.description)

        self.category = QtWidgets.QComboBox()
        self.category.addItem("Select a category", "")
        for c in CATEGORIES:
            self.category.addItem(humanize(c), c)
        self.category.currentIndexChanged.connect(self.field_edited("category"))
        form.addRow("Category *", self.errors.wrap("category", self.category))

        self.duration = QtWidgets.QSpinBox()
        self.duration.setRange(0, 600)
        self.duration.setSuffix(" min")
        self.duration.setValue(60)
        self.duration.valueChanged.connect(self.field_edited("duration"))
        form.addRow("Duration *", self.errors.wrap("duration", self.duration))

        self.capacity = QtWidgets.QSpinBox()
        self.capacity.setRange(0, 500)
        self.capacity.setValue(20)
        self.capacity.valueChanged.connect(self.field_edited("capacity"))
        form.addRow("Capacity *", self.errors.wrap("capacity", self.capacity))

        self.instructor = QtWidgets.QComboBox()
        self.instructor.addItem("Not assigned", None)
        form.addRow("Instructor", self.instructor)

        self.difficulty = QtWidgets.QComboBox()
        for d in DIFFICULTIES:
            self.difficulty.addItem(humanize(d), d)
        form.addRow("Difficulty", self.difficulty)

        self.equipment = QtWidgets.QLineEdit()
        self.equipment.setPlaceholderText("Comma separated, e.g. mat, blocks")
        form.addRow("Equipment", self.equipment)

        self.image = QtWidgets.QLineEdit()
        self.image.setPlaceholderText("Image URL")
        form.addRow("Image", self.image)

        self.active = QtWidgets.QCheckBox("Active")
        self.active.setChecked(True)
        form.addRow("", self.active)
        layout.addWidget(grp)

    def show_instructors(self, trainers) -> None:
        current = self.instructor.currentData()
        for t in trainers:
            if self.instructor.findData(t.id) < 0:
                self.instructor.addItem(t.full_name, t.id)
        self.instructor.setCurrentIndex(max(self.instructor.findData(current), 0))

    def fetch(self) -> GymClass:
        return class_service.get_class(self.ctx.client, self.route.record_id)

    def fill(self, c: GymClass) -> None:
        self.name.setText(c.name)
        self.description.setPlainText(c.description)
        self.category.setCurrentIndex(max(self.category.findData(c.category), 0))
        self.duration.setValue(c.duration or 0)
        self.capacity.setValue(c.capacity or 0)
        if c.instructor and self.instructor.findData(c.instructor) < 0:
            self.instructor.addItem(c.instructor_name or "Instructor", c.instructor)
        self.instructor.setCurrentIndex(max(self.instructor.findData(c.instructor), 0))
        self.difficulty.setCurrentIndex(max(self.difficulty.findData(c.difficulty), 0))
        self.equipment.setText(", ".join(c.equipment))
        self.image.setText(c.image)
        self.active.setChecked(c.is_active)
        self.title.setText(f"{self.title.text()} - {c.name}")

    def payload(self) -> Dict[str, Any]:
        equipment: List[str] = [e.strip() for e in self.equipment.text().split(",") if e.strip()]
        return GymClass(
            id=self.route.record_id,
            name=self.name.text().strip(),
            description=self.description.toPlainText().strip(),
            category=self.category.currentData(),
            duration=self.duration.value(),
            capacity=self.capacity.value(),
            instructor=self.instructor.currentData(),
            difficulty=self.difficulty.currentData(),
            equipment=equipment,
            image=self.image.text().strip(),
            is_active=self.active.isChecked(),
        ).to_payload()

    def describe(self) -> str:
        return f"the class '{self.name.text()}'"
