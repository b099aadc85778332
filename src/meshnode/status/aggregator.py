"""Join the route table with the peer table for rendering."""

from loguru import logger
from meshnode.models.status import PeerInfo, PeerRoutePair, Route


def _index_peers(peers: list[PeerInfo]) -> dict[int, PeerInfo]:
    index: dict[int, PeerInfo] = {}
    for peer in peers:
        if peer.peer_id in index:
            # Peer IDs are assumed unique per report; keep the last one seen.
            logger.warning(f'Duplicate peer_id {peer.peer_id} in peer table; keeping last entry')
        index[peer.peer_id] = peer
    return index


def pair(routes: list[Route], peers: list[PeerInfo]) -> list[PeerRoutePair]:
    """Pair every route with the peer that shares its peer_id.

    Produces one pair per route, in route order. ``peer`` is None while a
    route has no established connection. Peers without a route do not appear
    in the result but stay available in the original peer table.
    """
    index = _index_peers(peers)
    return [PeerRoutePair(route=route, peer=index.get(route.peer_id)) for route in routes]


def unpaired_peers(routes: list[Route], peers: list[PeerInfo]) -> list[PeerInfo]:
    """Get peers that no route points at, in peer table order."""
    routed = {route.peer_id for route in routes}
    return [peer for peer in peers if peer.peer_id not in routed]
