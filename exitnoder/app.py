"""
ExitNoder - macOS menu bar app.

Click a favorite to route through it, click it again to turn exit nodes
off. Location favorites rotate through every server in that city.
"""

import logging

import rumps

from . import APP_NAME, __version__
from .config import Config
from .favorites import MAX_FAVORITES, FavoritesStore
from .icons import generate_icons
from .logs import parse_level, setup_logging
from .startup import StartupManager
from .switcher import ExitNodeSwitcher
from .tailscale import TailscaleController

logger = logging.getLogger(__name__)

# Only single characters work as key equivalents, so ⌘1..⌘9
MAX_SHORTCUTS = 9


class ExitNoderApp(rumps.App):
    """macOS Menu Bar Application."""

    def __init__(self, config: Config):
        self.config = config
        self.icon_on, self.icon_off = generate_icons(config.icon_dir)

        super().__init__(
            name=APP_NAME,
            icon=self.icon_off,
            template=True,
            quit_button=None  # We'll add our own quit button
        )

        self.store = FavoritesStore(config.favorites_file)
        self.switcher = ExitNodeSwitcher(TailscaleController(config.tailscale_exe), self.store)
        self.switcher.subscribe(self.on_state_changed)
        self.startup_enabled = StartupManager.is_enabled()

        self.switcher.load_exit_nodes()
        self.switcher.backfill_hostnames()

        # Periodic status refresh
        self.timer = rumps.Timer(self.timer_refresh, config.refresh_interval)
        self.timer.start()

    # --- Menu ---------------------------------------------------------------

    def on_state_changed(self, switcher):
        self.update_ui()

    def update_ui(self):
        """Rebuild the menu and icon from the switcher's state."""
        active = self.switcher.current_exit_node is not None
        self.icon = self.icon_on if active else self.icon_off

        self.menu.clear()
        self.menu = self.build_menu()

    def build_menu(self) -> list:
        items = []

        if self.switcher.error_message:
            error_item = rumps.MenuItem(f"⚠️ {self.switcher.error_message}")
            items.extend([error_item, None])

        disable_item = rumps.MenuItem("Disable Exit Nodes", key="0")
        if self.switcher.current_exit_node is not None:
            disable_item.set_callback(self.disable_clicked, key="0")
        items.extend([disable_item, None])

        favorites = self.switcher.favorites
        for index, favorite in enumerate(favorites):
            title = favorite.name
            if favorite.is_group:
                title = f"{title} ({len(favorite.node_ids)})"
            item = rumps.MenuItem(
                title,
                callback=lambda sender, fid=favorite.favorite_id: self.favorite_clicked(fid),
                key=str(index + 1) if index < MAX_SHORTCUTS else None,
            )
            item.state = self.switcher.is_active(favorite)
            items.append(item)
        if favorites:
            items.append(None)

        items.append(self.build_favorites_menu())
        items.append(rumps.MenuItem("Refresh", callback=self.refresh_clicked, key="r"))
        items.append(None)

        startup_item = rumps.MenuItem("Start at Login", callback=self.toggle_startup)
        startup_item.state = self.startup_enabled
        items.append(startup_item)
        about_item = rumps.MenuItem(f"{APP_NAME} {__version__}")
        items.append(about_item)
        items.append(None)
        items.append(rumps.MenuItem("Quit", callback=self.quit_app, key="q"))
        return items

    def build_favorites_menu(self) -> rumps.MenuItem:
        """Favorites submenu: browse locations and tailnet nodes to (un)favorite."""
        menu = rumps.MenuItem("Favorites")
        count = len(self.store)

        locations = rumps.MenuItem("Locations")
        for group in self.switcher.location_groups:
            n = len(group.nodes)
            item = rumps.MenuItem(
                f"{group.display_name} ({n} server{'' if n == 1 else 's'})",
                callback=lambda sender, key=group.key: self.location_clicked(key),
            )
            item.state = self.store.find_by_location_key(group.key) is not None
            locations.add(item)
        if not self.switcher.location_groups:
            locations.add(rumps.MenuItem("No locations available"))
        menu.add(locations)

        tailnet = rumps.MenuItem("Tailnet Nodes")
        for node in self.switcher.tailnet_nodes:
            item = rumps.MenuItem(
                node.display_name,
                callback=lambda sender, node_id=node.id: self.node_clicked(node_id),
            )
            item.state = self.store.find_by_node_id(node.id) is not None
            tailnet.add(item)
        if not self.switcher.tailnet_nodes:
            tailnet.add(rumps.MenuItem("No tailnet exit nodes"))
        menu.add(tailnet)

        menu.add(None)
        menu.add(rumps.MenuItem(f"{count} of {MAX_FAVORITES} favorites used"))
        clear_item = rumps.MenuItem("Clear All Favorites")
        if count:
            clear_item.set_callback(self.clear_favorites)
        menu.add(clear_item)
        return menu

    # --- Actions ------------------------------------------------------------

    def timer_refresh(self, sender):
        self.switcher.load_exit_nodes()

    def refresh_clicked(self, sender):
        self.switcher.load_exit_nodes()

    def disable_clicked(self, sender):
        if self.switcher.disable():
            self.notify("Exit node disabled")
        else:
            rumps.alert("Error", self.switcher.error_message or "Operation failed.")

    def favorite_clicked(self, favorite_id: str):
        favorite = next(
            (f for f in self.switcher.favorites if f.favorite_id == favorite_id), None
        )
        if favorite is None:
            return

        was_active = self.switcher.is_active(favorite)
        if not self.switcher.toggle_favorite(favorite):
            rumps.alert("Error", self.switcher.error_message or "Operation failed. Check Tailscale status.")
            return

        if was_active:
            self.notify("Exit node disabled")
        else:
            node = self.switcher.find_node(self.switcher.current_exit_node or "")
            self.notify(f"Routing through {node.display_name if node else favorite.name}")

    def location_clicked(self, key: str):
        existing = self.store.find_by_location_key(key)
        if existing is not None:
            self.store.delete(existing)
        else:
            group = next((g for g in self.switcher.location_groups if g.key == key), None)
            if group is None:
                return
            if self.store.add_group(group) is None:
                rumps.alert("Favorites", f"Maximum {MAX_FAVORITES} favorites reached")
        self.update_ui()

    def node_clicked(self, node_id: str):
        existing = self.store.find_by_node_id(node_id)
        if existing is not None:
            self.store.delete(existing)
        else:
            node = self.switcher.find_node(node_id)
            if node is None:
                return
            if self.store.add_node(node) is None:
                rumps.alert("Favorites", f"Maximum {MAX_FAVORITES} favorites reached")
        self.update_ui()

    def clear_favorites(self, sender):
        response = rumps.alert(
            title="Clear All Favorites",
            message="Remove every favorite? This cannot be undone.",
            ok="Clear",
            cancel="Cancel",
        )
        if response == 1:
            self.store.clear()
            self.update_ui()

    def toggle_startup(self, sender):
        """Toggle startup at login."""
        if self.startup_enabled:
            if StartupManager.disable():
                self.startup_enabled = False
        else:
            if StartupManager.enable():
                self.startup_enabled = True
            else:
                rumps.alert("Error", "Failed to enable start at login.")
        sender.state = self.startup_enabled

    def notify(self, message: str):
        if not self.config.notifications:
            return
        rumps.notification(title=APP_NAME, subtitle="", message=message, sound=False)

    def quit_app(self, sender):
        rumps.quit_application()


def main():
    setup_logging(name=APP_NAME)
    config = Config()
    level = parse_level(config.log_level)
    if level != logging.INFO:
        setup_logging(name=APP_NAME, level=level)
    logger.info("Starting %s %s (tailscale: %s)", APP_NAME, __version__, config.tailscale_exe)

    app = ExitNoderApp(config)
    app.run()


if __name__ == "__main__":
    main()
