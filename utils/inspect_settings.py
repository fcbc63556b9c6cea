"""
Diagnostic script for SqlStudio.bin discovery and contents.
Usage: python utils/inspect_settings.py [extra;search;paths]
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from core.errors import SettingsError
from core.locator import SettingsLocator
from core.session import SettingsSession
from core.settings import AppSettings

CONFIG_FILE = ROOT / "data" / "config.json"


def section(title):
    print()
    print(f"{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def main(argv: list[str]) -> int:
    extra = argv[1] if len(argv) > 1 else AppSettings(CONFIG_FILE).get("paths_to_search", "")
    locator = SettingsLocator(extra_paths=extra)

    # ── Candidate directories ─────────────────────────────────────
    section("Candidate settings files")
    for path, exists in locator.probe():
        print(f"  [{'x' if exists else ' '}] {path}")

    session = SettingsSession(locator)
    try:
        document = session.load_document()
        index = session.server_index
    except SettingsError as e:
        print(f"\n  {e.step} failed: {e}")
        return 1

    # ── Document contents ─────────────────────────────────────────
    section(f"Document: {locator.resolved}")
    print(f"  groups:  {len(document.groups)}")
    print(f"  servers: {document.server_count}")
    for key, group in document.groups.items():
        print(f"\n  [{key}]  {len(group.servers)} server(s)")

    section("Servers")
    for name in index.sorted_names():
        logins = session.list_logins_for(name)
        print(f"  {name:<50} {len(logins)} login(s)")
        for user in logins:
            print(f"      - {user}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
