"""Steam installation lookup and library/manifest reading."""

import logging
import platform
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import MalformedDocument
from .nodes import ObjectNode
from .parser import parse
from .serializer import serialize

try:
    import winreg
except ImportError:
    winreg = None

logger = logging.getLogger(__name__)

STEAMID64_BASE = 76561197960265728

_STEAMID3_RE = re.compile(r"^\[?U:1:(\d+)\]?$")


@dataclass
class SteamGame:
    """Represents an installed Steam game."""

    appid: str
    name: str
    install_dir: str
    size_on_disk: int
    library_path: Path
    playtime_minutes: int = 0

    @property
    def manifest_path(self) -> Path:
        """Path to the appmanifest file."""
        return self.library_path / "steamapps" / f"appmanifest_{self.appid}.acf"

    @property
    def game_path(self) -> Path:
        """Path to the game installation folder."""
        return self.library_path / "steamapps" / "common" / self.install_dir

    @property
    def key(self) -> str:
        """Identifies the install; the same appid can live in several libraries."""
        return f"{self.library_path}:{self.appid}"

    def format_size(self) -> str:
        """Return human-readable size string."""
        return format_size(self.size_on_disk)

    def format_playtime(self) -> str:
        """Return human-readable playtime string."""
        if self.playtime_minutes == 0:
            return "-"
        hours = self.playtime_minutes / 60
        return f"{hours:.1f}h"


def format_size(size: float) -> str:
    """Return human-readable size string."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


def load_vdf(path: Path) -> ObjectNode:
    """
    Read and parse a text VDF file.

    Raises:
        OSError: if the file cannot be read
        MalformedDocument: if the file is not UTF-8 or not valid VDF
    """
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"not valid UTF-8: {e}") from e
    # Some tools write a BOM; the parser expects clean lines
    content = content.removeprefix("\ufeff")
    return parse(content.split("\n"))


def dump_vdf(path: Path, node: ObjectNode) -> None:
    """Serialize a tree and write it to path."""
    text = serialize(node)
    path.write_text(text, encoding="utf-8", newline="\n")


def _registry_steam_path() -> Path | None:
    if winreg is None:
        return None
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Software\Valve\Steam") as key:
            value, _ = winreg.QueryValueEx(key, "SteamPath")
    except OSError:
        return None
    return Path(value)


def _candidate_roots() -> list[Path]:
    home = Path.home()
    system = platform.system()

    if system == "Windows":
        candidates = [
            Path("C:/Program Files (x86)/Steam"),
            Path("C:/Program Files/Steam"),
        ]
        registry_path = _registry_steam_path()
        if registry_path is not None:
            candidates.insert(0, registry_path)
        return candidates

    if system == "Darwin":
        return [home / "Library" / "Application Support" / "Steam"]

    return [
        home / ".local" / "share" / "Steam",
        home / ".steam" / "steam",
        home / ".steam" / "debian-installation",
        home / ".var" / "app" / "com.valvesoftware.Steam" / ".local" / "share" / "Steam",
    ]


def find_steam_root(override: Path | None = None) -> Path | None:
    """
    Find the Steam installation directory.

    Priority:
    1. override (if it is a directory)
    2. Registry (Windows)
    3. Default locations for the current platform
    """
    if override is not None:
        if override.is_dir():
            return override
        logger.warning("Steam root override %s is not a directory", override)

    for path in _candidate_roots():
        if path.exists() and (path / "steamapps").exists():
            return path

    return None


def get_library_folders(steam_root: Path) -> list[Path]:
    """
    Get all Steam library folders by parsing libraryfolders.vdf.

    Returns a list of library paths including the main Steam folder.
    """
    candidates = [
        steam_root / "steamapps" / "libraryfolders.vdf",
        steam_root / "config" / "libraryfolders.vdf",
    ]
    vdf_path = next((p for p in candidates if p.exists()), None)
    if vdf_path is None:
        return [steam_root]

    try:
        data = load_vdf(vdf_path)
    except (OSError, MalformedDocument) as e:
        logger.warning("Could not read %s: %s", vdf_path, e)
        return [steam_root]

    libraries = []

    # The structure is: {"libraryfolders": {"0": {"path": "..."}, "1": {...}}}
    library_data = data.get_object("libraryfolders") or ObjectNode()

    for key, value in library_data.items():
        if not isinstance(value, ObjectNode):
            continue
        path = value.get_string("path")
        if path is None:
            continue
        lib_path = Path(path)
        if lib_path.exists():
            libraries.append(lib_path)
        else:
            logger.debug("Library %s (%s) does not exist", key, lib_path)

    # Ensure steam_root is included
    if steam_root not in libraries:
        libraries.insert(0, steam_root)

    return libraries


def get_playtime_data(steam_root: Path) -> dict[str, int]:
    """
    Get playtime data from localconfig.vdf.

    Returns a dict mapping appid -> playtime in minutes.
    """
    userdata_path = steam_root / "userdata"
    if not userdata_path.exists():
        return {}

    # Find user directories (there may be multiple Steam accounts)
    playtime: dict[str, int] = {}

    for user_dir in userdata_path.iterdir():
        if not user_dir.is_dir():
            continue

        config_file = user_dir / "config" / "localconfig.vdf"
        if not config_file.exists():
            continue

        try:
            data = load_vdf(config_file)
        except (OSError, MalformedDocument) as e:
            logger.warning("Skipping %s: %s", config_file, e)
            continue

        apps = data.find("UserLocalConfigStore", "Software", "Valve", "Steam", "apps")
        if not isinstance(apps, ObjectNode):
            continue

        for appid, app_data in apps.items():
            if not isinstance(app_data, ObjectNode):
                continue
            raw = app_data.get_string("Playtime")
            if raw is None:
                continue
            try:
                minutes = int(raw)
            except ValueError:
                logger.debug("Bad Playtime %r for app %s", raw, appid)
                continue
            # Keep the highest playtime if multiple users
            if minutes > playtime.get(appid, -1):
                playtime[appid] = minutes

    return playtime


def read_manifest(manifest: Path, library_path: Path) -> SteamGame | None:
    """Build a SteamGame from one appmanifest file, or None if it has no AppState."""
    data = load_vdf(manifest)

    app_state = data.get_object("AppState")
    if app_state is None:
        return None

    size_str = app_state.get_string("SizeOnDisk", "0")
    try:
        size_on_disk = int(size_str)
    except ValueError:
        size_on_disk = 0

    return SteamGame(
        appid=app_state.get_string("appid", ""),
        name=app_state.get_string("name", "Unknown"),
        install_dir=app_state.get_string("installdir", ""),
        size_on_disk=size_on_disk,
        library_path=library_path,
    )


def get_installed_games(
    library_path: Path, playtime_data: dict[str, int] | None = None
) -> list[SteamGame]:
    """
    Get all installed games from a Steam library folder.

    Parses appmanifest_*.acf files in the steamapps directory.
    """
    steamapps = library_path / "steamapps"
    if not steamapps.exists():
        return []

    games = []

    for manifest in steamapps.glob("appmanifest_*.acf"):
        try:
            game = read_manifest(manifest, library_path)
        except (OSError, MalformedDocument) as e:
            logger.warning("Skipping manifest %s: %s", manifest, e)
            continue

        if game is None:
            logger.debug("No AppState in %s", manifest)
            continue

        if playtime_data:
            game.playtime_minutes = playtime_data.get(game.appid, 0)
        games.append(game)

    return sorted(games, key=lambda g: g.name.lower())


def get_all_installed_games(steam_root: Path | None = None) -> list[SteamGame]:
    """Get all installed games across all Steam libraries."""
    if steam_root is None:
        steam_root = find_steam_root()
    if steam_root is None:
        return []

    libraries = get_library_folders(steam_root)
    playtime_data = get_playtime_data(steam_root)
    all_games = []

    for library in libraries:
        all_games.extend(get_installed_games(library, playtime_data))

    return sorted(all_games, key=lambda g: g.name.lower())


def steamid3_to_steamid64(steamid3: str) -> int:
    """
    Convert a SteamID3 such as ``[U:1:22202]`` (or a bare account id) to SteamID64.

    Raises:
        ValueError: if the input is not an individual-account SteamID3
    """
    text = steamid3.strip()
    if text.isdigit():
        account_id = int(text)
    else:
        match = _STEAMID3_RE.match(text)
        if match is None:
            raise ValueError(f"not a SteamID3: {steamid3!r}")
        account_id = int(match.group(1))
    return STEAMID64_BASE + account_id


def is_steam_running() -> bool:
    """Check if Steam is currently running."""
    import psutil

    for proc in psutil.process_iter(["name"]):
        try:
            name = proc.info["name"]
            if name and name.lower() in ("steam", "steam.exe"):
                return True
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return False
