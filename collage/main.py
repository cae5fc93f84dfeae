"""Точка входа графического приложения Collage Studio."""
import logging

from collage.app import CollageStudioApp


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = CollageStudioApp()
    app.mainloop()


if __name__ == "__main__":
    main()
