"""Główne okno aplikacji GUI."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStyle,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from file_scanner.core import FileMetadata
from file_scanner.shared import AppConfig
from .localization import LocalizationManager
from .picker import QtDirectoryPicker
from .view_models import ScanViewModel


_STATUS_STYLE = "padding: 4px 12px; border-radius: 10px; background: #f1e5cf; color: {color};"
_TOAST_STYLE = "padding: 10px 14px; border-radius: 10px; background: #b42318; color: white;"


class MainWindow(QMainWindow):
    """Główne okno skanera: wybór katalogu, liczniki i lista wyników."""

    def __init__(
        self,
        *,
        config: AppConfig | None = None,
        localization: LocalizationManager | None = None,
        view_model: ScanViewModel | None = None,
        picker: QtDirectoryPicker | None = None,
    ) -> None:
        super().__init__()

        self._config = config or AppConfig.default()
        self._localization = localization or LocalizationManager(locale=self._config.locale)
        self._view_model = view_model or ScanViewModel(config=self._config)
        self._picker = picker or QtDirectoryPicker(self)
        self._rendered_rows = 0

        self.setMinimumSize(720, 560)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        header_layout = QHBoxLayout()
        title_layout = QVBoxLayout()
        self._title_label = QLabel()
        self._title_label.setStyleSheet("font-size: 24px; font-weight: bold;")
        title_layout.addWidget(self._title_label)
        self._description_label = QLabel()
        self._description_label.setStyleSheet("color: #6b6f76;")
        title_layout.addWidget(self._description_label)
        header_layout.addLayout(title_layout, stretch=1)

        self.status_chip = QLabel()
        self.status_chip.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header_layout.addWidget(self.status_chip, alignment=Qt.AlignmentFlag.AlignBottom)
        layout.addLayout(header_layout)

        controls_layout = QHBoxLayout()
        self.choose_button = QPushButton()
        self.choose_button.setMinimumSize(180, 44)
        self.choose_button.clicked.connect(self._choose_directory)
        controls_layout.addWidget(self.choose_button)
        controls_layout.addStretch(1)

        self._language_label = QLabel()
        controls_layout.addWidget(self._language_label)
        self._language_selector = QComboBox()
        for locale, display in self._localization.available_locales().items():
            self._language_selector.addItem(display, locale)
        self._language_selector.setCurrentIndex(self._language_selector.findData(self._localization.locale))
        self._language_selector.currentIndexChanged.connect(self._on_language_changed)
        controls_layout.addWidget(self._language_selector)
        layout.addLayout(controls_layout)

        self.metrics_label = QLabel()
        self.metrics_label.setStyleSheet("font-weight: 600; margin-top: 12px;")
        layout.addWidget(self.metrics_label)

        self.location_label = QLabel()
        self.location_label.setStyleSheet("color: #6b6f76;")
        layout.addWidget(self.location_label)

        self.results_tree = QTreeWidget()
        self.results_tree.setColumnCount(2)
        self.results_tree.setRootIsDecorated(False)
        self.results_tree.setAlternatingRowColors(True)
        self.results_tree.setColumnWidth(0, 420)
        layout.addWidget(self.results_tree, stretch=1)

        self.empty_label = QLabel()
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setStyleSheet("padding: 28px; color: #6b6f76; border: 1px dashed #e2d4be;")
        layout.addWidget(self.empty_label, stretch=1)

        self.toast_label = QLabel()
        self.toast_label.setStyleSheet(_TOAST_STYLE)
        self.toast_label.setWordWrap(True)
        self.toast_label.setMaximumWidth(300)
        self.toast_label.hide()
        layout.addWidget(self.toast_label, alignment=Qt.AlignmentFlag.AlignRight)

        self._connect_view_model()
        self._retranslate_ui()

    # ------------------------------------------------------------------
    # Reakcje UI
    # ------------------------------------------------------------------

    def view_model(self) -> ScanViewModel:
        return self._view_model

    def _connect_view_model(self) -> None:
        self._view_model.scanStarted.connect(self._on_scan_started)
        self._view_model.scanFinished.connect(self._on_scan_finished)
        self._view_model.stateChanged.connect(self._render)
        self._view_model.notificationChanged.connect(self._on_notification_changed)

    def _choose_directory(self) -> None:
        self._picker.title = self._text("dialog.choose.title")
        self._view_model.choose_directory(self._picker)

    def _on_language_changed(self, index: int) -> None:
        locale = self._language_selector.itemData(index)
        if not locale:
            return
        self._localization.set_locale(locale)
        self._retranslate_ui()

    def _on_scan_started(self, _path: str) -> None:
        self.results_tree.clear()
        self._rendered_rows = 0

    def _on_scan_finished(self) -> None:
        self.results_tree.resizeColumnToContents(0)

    def _on_notification_changed(self, message: str) -> None:
        self.toast_label.setText(message)
        self.toast_label.setVisible(bool(message))

    # ------------------------------------------------------------------
    # Renderowanie
    # ------------------------------------------------------------------

    def _retranslate_ui(self) -> None:
        self.setWindowTitle(self._text("app.title"))
        self._title_label.setText(self._text("app.title"))
        self._description_label.setText(self._text("app.description"))
        self.choose_button.setText(self._text("button.choose"))
        self._language_label.setText(self._text("language.label"))
        self.results_tree.setHeaderLabels([self._text("column.name"), self._text("column.details")])
        self.empty_label.setText(self._text("list.empty"))

        self.results_tree.clear()
        self._rendered_rows = 0
        self._render()

    def _render(self) -> None:
        coordinator = self._view_model.coordinator()
        scanning = coordinator.is_scanning

        self.status_chip.setText(self._localization.status_label(coordinator.status, coordinator.scanned_count))
        self.status_chip.setStyleSheet(_STATUS_STYLE.format(color="#c46d0d" if scanning else "#136f63"))
        self.choose_button.setEnabled(not scanning)

        self.metrics_label.setText(
            self._text("metrics.summary", files=coordinator.file_count, elapsed=coordinator.elapsed_ms)
        )
        target = coordinator.target_path
        self.location_label.setText(
            self._text("location.selected", path=target) if target else self._text("location.none")
        )

        session = coordinator.session
        entries = session.entries if session is not None else []
        for entry in entries[self._rendered_rows :]:
            self.results_tree.addTopLevelItem(self._build_row(entry))
        self._rendered_rows = len(entries)

        has_rows = bool(entries)
        self.results_tree.setVisible(has_rows)
        self.empty_label.setVisible(not has_rows)

    def _build_row(self, entry: FileMetadata) -> QTreeWidgetItem:
        item = QTreeWidgetItem([entry.name, self.format_entry_details(entry, self._localization)])
        pixmap = QStyle.StandardPixmap.SP_DirIcon if entry.is_dir else QStyle.StandardPixmap.SP_FileIcon
        item.setIcon(0, self.style().standardIcon(pixmap))
        item.setTextAlignment(1, Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        return item

    @staticmethod
    def format_entry_details(entry: FileMetadata, localization: LocalizationManager) -> str:
        if entry.is_dir:
            return localization.text("entry.folder")
        return localization.text("entry.size", size=entry.size_kb)

    def _text(self, key: str, **values: object) -> str:
        return self._localization.text(key, **values)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - API Qt
        self._view_model.close()
        super().closeEvent(event)


__all__ = ["MainWindow"]
