from __future__ import annotations

import logging

from tbo.application.container import build_container
from tbo.config import get_app_paths, load_settings
from tbo.logging_config import setup_logging
from tbo.ui.app import App


def main() -> None:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)

    container = build_container(load_settings())

    app = App(container, exports_dir=str(paths.exports_dir), logs_dir=str(paths.logs_dir))
    if app.current_user is None:
        return
    app.mainloop()


if __name__ == "__main__":
    main()
