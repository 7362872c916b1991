"""
Application state: available exit nodes, the active one, and favorites.

Kept free of any UI toolkit so the menu-bar app stays a thin view over it.
"""

import logging
from typing import Callable, List, Optional

from .favorites import Favorite, FavoritesStore
from .locations import LocationGroup, group_by_location, tailnet_nodes
from .models import ExitNode
from .tailscale import TailscaleController, TailscaleError

logger = logging.getLogger(__name__)


class ExitNodeSwitcher:
    """
    Tracks daemon state and turns favorite clicks into exit node changes.

    Clicking the active favorite disables exit nodes. Clicking any other
    favorite asks it for its next node and activates that node. The daemon
    is re-queried after every change rather than assuming the outcome.
    """

    def __init__(self, tailscale: TailscaleController, store: FavoritesStore):
        self.tailscale = tailscale
        self.store = store
        self.available_exit_nodes: List[ExitNode] = []
        self.current_exit_node: Optional[str] = None
        self.is_loading = False
        self.error_message: Optional[str] = None
        self._listeners: List[Callable[["ExitNodeSwitcher"], None]] = []

    def subscribe(self, callback: Callable[["ExitNodeSwitcher"], None]):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    @property
    def favorites(self) -> List[Favorite]:
        return self.store.favorites

    @property
    def location_groups(self) -> List[LocationGroup]:
        return group_by_location(self.available_exit_nodes)

    @property
    def tailnet_nodes(self) -> List[ExitNode]:
        return tailnet_nodes(self.available_exit_nodes)

    def find_node(self, node_id: str) -> Optional[ExitNode]:
        for node in self.available_exit_nodes:
            if node.id == node_id:
                return node
        return None

    def load_exit_nodes(self) -> bool:
        """Refresh the node list and current exit node from the daemon."""
        self.is_loading = True
        self.error_message = None
        try:
            status = self.tailscale.get_status()
            self.available_exit_nodes = status.exit_nodes
            self.current_exit_node = status.exit_node_id
            return True
        except TailscaleError as e:
            logger.error("Loading exit nodes failed: %s", e)
            self.error_message = str(e)
            return False
        finally:
            self.is_loading = False
            self._notify()

    def set_exit_node(self, node_id: Optional[str], node_name: Optional[str] = None) -> bool:
        """
        Activate `node_id` (None disables) and re-read the active node.

        `node_name` is what gets passed to the CLI; it defaults to the
        node's DNS name when the node is known, else the id itself.
        """
        self.is_loading = True
        self.error_message = None
        try:
            if node_id is None:
                self.tailscale.set_exit_node(None)
            else:
                self.tailscale.set_exit_node(node_name or self._cli_target(node_id))
            status = self.tailscale.get_status()
            self.available_exit_nodes = status.exit_nodes
            self.current_exit_node = status.exit_node_id
            return True
        except TailscaleError as e:
            logger.error("Setting exit node to %s failed: %s", node_id, e)
            self.error_message = str(e)
            return False
        finally:
            self.is_loading = False
            self._notify()

    def disable(self) -> bool:
        return self.set_exit_node(None)

    def is_active(self, favorite: Favorite) -> bool:
        return favorite.is_active(self.current_exit_node)

    def toggle_favorite(self, favorite: Favorite) -> bool:
        if self.is_active(favorite):
            logger.info("Favorite %s is active, disabling exit node", favorite.name)
            return self.disable()

        node_id = favorite.next_node_id()
        # Cursor is saved before the request; a failed request keeps it advanced
        self.store.update(favorite)

        node_name = None
        if self.find_node(node_id) is None and node_id == favorite.node_id:
            node_name = favorite.hostname_or_fallback.rstrip(".")
        logger.info("Activating %s via favorite %s", node_id, favorite.name)
        return self.set_exit_node(node_id, node_name)

    def backfill_hostnames(self) -> int:
        """Give favorites saved without a DNS name the one the daemon reports."""
        if not any(not f.hostname for f in self.store.favorites):
            return 0
        if not self.available_exit_nodes and not self.load_exit_nodes():
            return 0
        return self.store.backfill_hostnames(self.available_exit_nodes)

    def _cli_target(self, node_id: str) -> str:
        node = self.find_node(node_id)
        return node.cli_name if node is not None else node_id
