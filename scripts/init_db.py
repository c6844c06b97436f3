"""Initialize the SlotMarket database and image folders."""

from slotmarket.config import load_config
from slotmarket.media.image_store import LocalImageStore


def main() -> None:
    config = load_config()
    folders = LocalImageStore(config.media_paths).ensure_namespaces()
    print(f"Database initialized, {folders} slot image folders ready.")


if __name__ == "__main__":
    main()
