"""
Non-modal Dialog showing every field of one card
"""
import html
from typing import Optional

from PySide6.QtWidgets import QDialog, QVBoxLayout, QFormLayout, QLabel, QFrame, QDialogButtonBox, QWidget
from PySide6.QtCore import Qt

from tronk.model.card import Card
from tronk.utils import format_tags


class CardDetailsDialog(QDialog):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Card Details")
        self.setModal(False)
        self.card: Optional[Card] = None

        layout = QVBoxLayout(self)

        preview = QLabel("image preview")
        preview.setAlignment(Qt.AlignCenter)
        preview.setMinimumHeight(120)
        preview.setStyleSheet("color: gray; border: 1px dashed gray;")
        layout.addWidget(preview)

        line = QFrame()
        line.setFrameShape(QFrame.HLine)
        line.setFrameShadow(QFrame.Sunken)
        layout.addWidget(line)

        form = QFormLayout()
        self.lbl_name = QLabel()
        self.lbl_tags = QLabel()
        self.lbl_folders = QLabel()
        self.lbl_url = QLabel()
        self.lbl_url.setTextFormat(Qt.RichText)
        self.lbl_url.setOpenExternalLinks(True)
        self.lbl_description = QLabel()
        self.lbl_description.setWordWrap(True)
        self.lbl_id = QLabel()
        self.lbl_id.setStyleSheet("color: gray;")

        for lbl in (self.lbl_name, self.lbl_tags, self.lbl_folders, self.lbl_description, self.lbl_id):
            lbl.setTextFormat(Qt.PlainText)
            lbl.setTextInteractionFlags(Qt.TextSelectableByMouse)

        form.addRow("name:", self.lbl_name)
        form.addRow("tags:", self.lbl_tags)
        form.addRow("folders:", self.lbl_folders)
        form.addRow("url:", self.lbl_url)
        form.addRow("description:", self.lbl_description)
        form.addRow("id:", self.lbl_id)
        layout.addLayout(form)
        layout.addStretch()

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def show_card(self, card: Card) -> None:
        self.card = card
        self.lbl_name.setText(card.name)
        self.lbl_tags.setText(format_tags(card.tags))
        self.lbl_folders.setText(", ".join(card.folders))
        if card.url:
            url = html.escape(card.url, quote=True)
            self.lbl_url.setText(f'<a href="{url}">{url}</a>')
        else:
            self.lbl_url.setText("")
        self.lbl_description.setText(card.description)
        self.lbl_id.setText(str(card.id))
        self.show()
        self.raise_()
