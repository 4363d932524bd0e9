"""Nieblokujący wybór katalogu oparty na QFileDialog."""

from __future__ import annotations

import asyncio

from PySide6.QtWidgets import QFileDialog, QWidget


class QtDirectoryPicker:
    """Otwiera dialog wyboru pojedynczego katalogu i czeka na decyzję użytkownika.

    Dialog działa w trybie ``open()`` (modalny względem okna, ale bez
    zagnieżdżonej pętli zdarzeń), a wynik trafia do future bieżącej pętli.
    """

    def __init__(self, parent: QWidget | None = None, *, title: str = "Choose Directory") -> None:
        self._parent = parent
        self.title = title

    def create_dialog(self) -> QFileDialog:
        dialog = QFileDialog(self._parent, self.title)
        dialog.setFileMode(QFileDialog.FileMode.Directory)
        dialog.setOption(QFileDialog.Option.ShowDirsOnly, True)
        return dialog

    async def select_directory(self) -> str | None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str | None] = loop.create_future()
        dialog = self.create_dialog()

        def _resolve(path: str | None) -> None:
            if not future.done():
                future.set_result(path or None)

        dialog.fileSelected.connect(_resolve)
        dialog.rejected.connect(lambda: _resolve(None))
        dialog.open()
        try:
            return await future
        finally:
            dialog.deleteLater()


__all__ = ["QtDirectoryPicker"]
