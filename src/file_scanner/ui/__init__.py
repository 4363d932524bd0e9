"""Warstwa prezentacji i modele widoku GUI."""

from .localization import LocalizationManager
from .main_window import MainWindow
from .picker import QtDirectoryPicker
from .view_models import ScanViewModel

__all__ = ["LocalizationManager", "MainWindow", "QtDirectoryPicker", "ScanViewModel"]
