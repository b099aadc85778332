"""Decoding and aggregation of engine status reports."""

from meshnode.status.aggregator import pair, unpaired_peers
from meshnode.status.decoder import decode_network_instance, decode_running_info

__all__ = [
    'decode_network_instance',
    'decode_running_info',
    'pair',
    'unpaired_peers',
]
