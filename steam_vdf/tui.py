"""Textual TUI for browsing installed games and their manifests."""

from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Input, Static, Tree
from textual.widgets.tree import TreeNode

from .errors import MalformedDocument
from .nodes import ObjectNode, StringNode
from .steam import SteamGame, get_all_installed_games, is_steam_running, load_vdf


def populate_tree(parent: TreeNode, node: ObjectNode) -> None:
    """Add one tree entry per property, recursing into sections."""
    for key, value in node.items():
        if isinstance(value, StringNode):
            parent.add_leaf(Text.assemble((key, "bold"), " = ", value.value))
        else:
            branch = parent.add(Text(key, style="bold"), expand=True)
            populate_tree(branch, value)


class ManifestScreen(Screen):
    """Shows the parsed appmanifest of one game."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("q", "back", "Back"),
    ]

    def __init__(self, game: SteamGame):
        super().__init__()
        self.game = game

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(
                Text.assemble(
                    (self.game.name, "bold"), f" ({self.game.manifest_path})"
                ),
                id="manifest-title",
            ),
            Tree("manifest", id="manifest-tree"),
            id="manifest-container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Load the manifest into the tree."""
        tree = self.query_one("#manifest-tree", Tree)
        tree.show_root = False

        try:
            data = load_vdf(self.game.manifest_path)
        except (OSError, MalformedDocument) as e:
            self.notify(f"Could not read manifest: {e}", severity="error")
            return

        populate_tree(tree.root, data)
        tree.root.expand()

    def action_back(self) -> None:
        """Go back to game list."""
        self.app.pop_screen()


class GameListScreen(Screen):
    """Main screen showing list of installed games."""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "clear_filter", "Clear Filter"),
    ]

    def __init__(self, games: list[SteamGame]):
        super().__init__()
        self.games = games
        self.filtered_games: list[SteamGame] = games.copy()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(
                f"Found [bold]{len(self.games)}[/bold] installed games. "
                "Press Enter to view a manifest.",
                id="subtitle",
            ),
            Input(placeholder="Filter games...", id="filter-input"),
            DataTable(id="games-table"),
            id="main-container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Initialize the data table."""
        table = self.query_one("#games-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True

        table.add_column("App ID", key="appid", width=10)
        table.add_column("Game", key="name")
        table.add_column("Size", key="size", width=12)
        table.add_column("Played", key="playtime", width=10)
        table.add_column("Library", key="library", width=30)

        self._populate_table()

    def _populate_table(self) -> None:
        """Populate or refresh the table with games."""
        table = self.query_one("#games-table", DataTable)
        table.clear()

        home = str(Path.home())
        for game in self.filtered_games:
            # Shorten library path for display
            lib_str = str(game.library_path)
            if lib_str.startswith(home):
                lib_str = "~" + lib_str[len(home) :]

            table.add_row(
                game.appid,
                game.name,
                game.format_size(),
                game.format_playtime(),
                lib_str,
                key=game.key,
            )

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter games based on search input."""
        filter_text = event.value.lower()
        if filter_text:
            self.filtered_games = [
                g for g in self.games if filter_text in g.name.lower()
            ]
        else:
            self.filtered_games = self.games.copy()
        self._populate_table()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Open the manifest of the selected game (Enter key or click)."""
        key = str(event.row_key.value)
        game = next((g for g in self.games if g.key == key), None)
        if game is not None:
            self.app.push_screen(ManifestScreen(game))

    def action_clear_filter(self) -> None:
        """Clear the filter input."""
        self.query_one("#filter-input", Input).value = ""

    def action_quit(self) -> None:
        """Quit the application."""
        self.app.exit()


class SteamVdfApp(App):
    """Main application."""

    CSS = """
    #main-container {
        padding: 1 2;
    }

    #subtitle {
        margin-bottom: 1;
    }

    #filter-input {
        margin-bottom: 1;
    }

    #games-table {
        height: 1fr;
    }

    #manifest-container {
        padding: 1 2;
    }

    #manifest-title {
        margin-bottom: 1;
    }

    #manifest-tree {
        height: 1fr;
        border: solid green;
    }
    """

    TITLE = "Steam Manifest Browser"

    def __init__(self, steam_root: Path):
        super().__init__()
        self.steam_root = steam_root

    def on_mount(self) -> None:
        """Initialize the application."""
        # Steam rewrites manifests while running
        if is_steam_running():
            self.notify(
                "Steam is running. Manifests may change while you browse.",
                severity="warning",
                timeout=5,
            )

        games = get_all_installed_games(self.steam_root)

        if not games:
            self.notify("No Steam games found!", severity="error")
            self.exit()
            return

        self.push_screen(GameListScreen(games))


def run_tui(steam_root: Path) -> None:
    """Run the TUI application."""
    app = SteamVdfApp(steam_root)
    app.run()
