# Rev 0.2.0

# taskapp/main.py
import sys

from PySide6.QtCore import Qt, QCoreApplication
from PySide6.QtGui import QFont, QGuiApplication
from PySide6.QtWidgets import QApplication, QDialog

from taskapp.app_context import AppContext
from taskapp.services.session import Session
from taskapp.ui.dashboard_window import DashboardWindow
from taskapp.ui.dialogs.login_dialog import LoginDialog
from taskapp.utils.config import load_settings
from taskapp.utils.logging_setup import get_logger, setup_logging
from taskapp.utils.paths import ensure_dirs

log = get_logger("main")


def _login(app: QApplication, ctx: AppContext) -> bool:
    """Show the login dialog and, on success, the dashboard. False when the user cancels."""
    dlg = LoginDialog(ctx)
    if dlg.exec() != QDialog.Accepted or dlg.user() is None:
        return False
    win = DashboardWindow(ctx, Session(dlg.user()))
    win.closed.connect(lambda relogin: (relogin and _login(app, ctx)) or app.quit())
    # Keep a strong ref; the previous window is replaced on re-login
    app.setProperty("mainWindow", win)
    return True


def main() -> int:
    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    app = QApplication(sys.argv)
    QCoreApplication.setOrganizationName("taskapp")
    QCoreApplication.setApplicationName("TaskApp")
    app.setQuitOnLastWindowClosed(False)

    ensure_dirs()
    logfile = setup_logging()
    log.info("Writing log to %s", logfile)

    config = load_settings()
    ctx = AppContext.create(config["database"]["path"], config)
    app.setFont(QFont("Sans Serif", 10))
    try:
        if not _login(app, ctx):
            return 0
        return app.exec()
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
