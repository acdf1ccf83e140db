# src/codaview/gui/main_window.py

from __future__ import annotations

import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QFont
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QSplitter,
    QStatusBar,
    QTabWidget,
    QTreeWidget,
    QTreeWidgetItem,
    QWidget,
)

from codaview.config import load_settings, remember_directory
from codaview.errors import CodaError
from codaview.log import setup_logging
from codaview.logic.transaction_code import describe_transaction_code
from codaview.models.coda_line import CodaLine
from codaview.models.statement import Statement, Transaction
from codaview.parser.coda_parser import ParsedFile, read_coda_file

logger = logging.getLogger(__name__)

# raw 表示の上に出す桁ルーラー（1〜128桁）
COLUMN_RULER = "".join(str(i % 10) for i in range(1, 129))


# ─────────────────────────────
# 表示用の整形ヘルパ（Qt に依存しない）
# ─────────────────────────────
def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def format_line_item(line: CodaLine) -> str:
    """行一覧の1項目: 「行番号 [種別] 先頭40文字」。"""
    summary = line.raw.strip()
    if len(summary) > 40:
        summary = summary[:40] + "…"
    return f"{line.line_no:05d} [{line.line_type.value}] {summary}"


def transaction_row(tx: Transaction) -> List[str]:
    """取引ツリーの1行分の列値。"""
    counterparty = tx.counterparty.name or tx.counterparty.number
    message = tx.structured_message or tx.message
    return [
        f"{tx.sequence_number:04d}",
        f"{tx.detail_sequence_number:04d}",
        tx.transaction_date.isoformat() if tx.transaction_date else "",
        format_amount(tx.amount),
        counterparty,
        describe_transaction_code(tx.transaction_code),
        message,
    ]


def statement_rows(statement: Statement) -> List[Tuple[str, str]]:
    """明細書タブに出す (項目, 値) の一覧。"""
    account = statement.account
    rows = [
        ("Created", statement.date.isoformat()),
        ("Statement", str(statement.sequence_number)),
        ("Account", f"{account.number} {account.currency}".strip()),
        ("Holder", account.name),
        ("BIC", account.bic),
        ("Description", account.description),
        ("Initial balance", format_amount(statement.initial_balance)),
        ("New balance", format_amount(statement.new_balance)),
        ("New balance date", statement.new_date.isoformat()),
        ("Transactions", str(len(statement.transactions))),
    ]
    if statement.summary is not None:
        rows.append(("Total debit", format_amount(statement.summary.debit_amount)))
        rows.append(("Total credit", format_amount(statement.summary.credit_amount)))
    if statement.informational_message:
        rows.append(("Message", statement.informational_message))
    if statement.is_duplicate:
        rows.append(("Duplicate", "yes"))
    return rows


class MainWindow(QMainWindow):
    """
    CodaView のメインウィンドウ。

    1ファイル = 1明細書として表示する。
    """

    TAB_STATEMENT = 0     # 明細書の概要
    TAB_LINES = 1         # 行一覧
    TAB_TRANSACTIONS = 2  # 取引一覧

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("CodaView - CODA statement viewer")
        self.resize(1100, 650)

        self._settings = load_settings()
        self._parsed: Optional[ParsedFile] = None

        self._create_central_widgets()
        self._create_actions()
        self._create_menus()
        self._create_status_bar()

    # ─────────────────────────────
    # UI 構築
    # ─────────────────────────────
    def _create_central_widgets(self) -> None:
        self.tabs = QTabWidget(self)

        # ── タブ0: 明細書 ─────────────────────
        self.statement_tree = QTreeWidget(self)
        self.statement_tree.setColumnCount(2)
        self.statement_tree.setHeaderLabels(["Item", "Value"])
        self.tabs.addTab(self.statement_tree, "Statement")

        # ── タブ1: 行一覧 ─────────────────────
        line_splitter = QSplitter(Qt.Horizontal, self)

        self.line_list = QListWidget(line_splitter)
        self.line_list.setSelectionMode(QListWidget.SingleSelection)
        self.line_list.currentRowChanged.connect(self._on_line_selected)

        self.raw_view = self._create_raw_view(line_splitter)
        self.raw_view.setPlaceholderText("Select a line to show its raw content")

        line_splitter.addWidget(self.line_list)
        line_splitter.addWidget(self.raw_view)
        line_splitter.setStretchFactor(0, 1)
        line_splitter.setStretchFactor(1, 3)

        self.tabs.addTab(line_splitter, "Lines")

        # ── タブ2: 取引一覧 ─────────────────────
        tx_splitter = QSplitter(Qt.Vertical, self)

        self.transaction_tree = QTreeWidget(tx_splitter)
        self.transaction_tree.setColumnCount(7)
        self.transaction_tree.setHeaderLabels([
            "Seq",
            "Detail",
            "Entry date",
            "Amount",
            "Counterparty",
            "Code",
            "Communication",
        ])
        self.transaction_tree.currentItemChanged.connect(self._on_transaction_selected)

        self.transaction_raw_view = self._create_raw_view(tx_splitter)

        tx_splitter.addWidget(self.transaction_tree)
        tx_splitter.addWidget(self.transaction_raw_view)
        tx_splitter.setStretchFactor(0, 3)
        tx_splitter.setStretchFactor(1, 1)

        self.tabs.addTab(tx_splitter, "Transactions")

        self.setCentralWidget(self.tabs)

    def _create_raw_view(self, parent: QWidget) -> QPlainTextEdit:
        view = QPlainTextEdit(parent)
        view.setReadOnly(True)
        view.setLineWrapMode(QPlainTextEdit.NoWrap)
        font = QFont("Monospace")
        font.setStyleHint(QFont.TypeWriter)
        view.setFont(font)
        return view

    def _create_actions(self) -> None:
        self.open_action = QAction("&Open...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._on_open_file)

        self.exit_action = QAction("&Quit", self)
        self.exit_action.setShortcut("Ctrl+Q")
        self.exit_action.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction(self.open_action)
        file_menu.addSeparator()
        file_menu.addAction(self.exit_action)

    def _create_status_bar(self) -> None:
        status = QStatusBar(self)
        self.setStatusBar(status)
        self.statusBar().showMessage("Open a CODA file (Ctrl+O)")

    # ─────────────────────────────
    # ファイル読み込み
    # ─────────────────────────────
    def _on_open_file(self) -> None:
        path_str, _ = QFileDialog.getOpenFileName(
            self,
            "Open CODA file",
            self._settings.last_directory or "",
            "CODA files (*.cod *.coda *.txt);;All files (*.*)",
        )
        if not path_str:
            return

        self.load_file(Path(path_str))

    def load_file(self, path: Path) -> None:
        try:
            parsed = read_coda_file(path, self._settings.fallback_encodings)
        except CodaError as e:
            logger.error("Could not load %s: %s", path, e)
            self.statusBar().showMessage(f"Could not load {path.name}")
            QMessageBox.warning(self, "CodaView", str(e))
            return

        self._parsed = parsed
        remember_directory(path.parent)
        self._settings.last_directory = str(path.parent)

        self._populate_statement(parsed.statement)
        self._populate_line_list(parsed.lines)
        self._populate_transactions(parsed.statement)

        self.statusBar().showMessage(
            f"Loaded {path.name} ({parsed.encoding}, {len(parsed.lines)} lines, "
            f"{len(parsed.statement.transactions)} transactions)"
        )

    def _populate_statement(self, statement: Statement) -> None:
        self.statement_tree.clear()
        for label, value in statement_rows(statement):
            QTreeWidgetItem(self.statement_tree, [label, value])
        self.statement_tree.resizeColumnToContents(0)

    def _populate_line_list(self, lines: Tuple[CodaLine, ...]) -> None:
        self.line_list.clear()
        self.raw_view.clear()

        for line in lines:
            self.line_list.addItem(format_line_item(line))

        if lines:
            self.line_list.setCurrentRow(0)

    def _populate_transactions(self, statement: Statement) -> None:
        self.transaction_tree.clear()
        self.transaction_raw_view.clear()

        for index, tx in enumerate(statement.transactions):
            item = QTreeWidgetItem(self.transaction_tree, transaction_row(tx))
            item.setData(0, Qt.UserRole, index)
            item.setTextAlignment(3, Qt.AlignRight | Qt.AlignVCenter)

        for col in range(6):
            self.transaction_tree.resizeColumnToContents(col)

    # ─────────────────────────────
    # 選択時の表示
    # ─────────────────────────────
    def _on_line_selected(self, row: int) -> None:
        if self._parsed is None or not (0 <= row < len(self._parsed.lines)):
            self.raw_view.clear()
            return

        line = self._parsed.lines[row]
        self.raw_view.setPlainText(f"{COLUMN_RULER}\n{line.raw}")

    def _on_transaction_selected(self, current: Optional[QTreeWidgetItem], _previous) -> None:
        if self._parsed is None or current is None:
            self.transaction_raw_view.clear()
            return

        tx = self._parsed.statement.transactions[current.data(0, Qt.UserRole)]
        by_line_no = {line.line_no: line for line in self._parsed.lines}
        raw_lines = [by_line_no[n].raw for n in tx.line_numbers if n in by_line_no]
        self.transaction_raw_view.setPlainText("\n".join([COLUMN_RULER, *raw_lines]))


def run(argv: Optional[List[str]] = None) -> int:
    """ビューアを起動する。引数にファイルパスがあれば最初に開く。"""
    argv = list(sys.argv if argv is None else argv)
    setup_logging(load_settings().log_level)

    app = QApplication(argv)
    win = MainWindow()
    if len(argv) > 1:
        win.load_file(Path(argv[1]))
    win.show()
    return app.exec()
