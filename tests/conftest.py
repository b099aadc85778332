"""Shared pytest fixtures for profile and status tests."""

import copy
import json
import pytest
from meshnode.models.profile import NetworkProfile


SAMPLE_REPORT = {
    'dev_name': 'utun10',
    'my_node_info': {
        'virtual_ipv4': {'address': {'addr': 177246218}, 'network_length': 24},
        'hostname': 'my-macbook-pro',
        'version': '0.10.1',
        'ips': {
            'public_ipv4': {'addr': 134744072},
            'interface_ipv4s': [{'addr': 3232235876}],
            'public_ipv6': None,
            'interface_ipv6s': [],
        },
        'stun_info': {'udp_nat_type': 3, 'tcp_nat_type': 0, 'last_update_time': 1767096000.0},
        'listeners': [{'url': 'tcp://0.0.0.0:11010'}, {'url': 'udp://0.0.0.0:11010'}],
        'vpn_portal_cfg': None,
    },
    'events': [
        '{"time":"2025-12-30T12:00:05Z","event":{"PeerAdded":123}}',
        '{"time":"2025-12-30T12:00:00Z","event":{"TunDeviceReady":"utun10"}}',
    ],
    'routes': [
        {
            'peer_id': 123,
            'ipv4_addr': '10.144.144.11',
            'next_hop_peer_id': 123,
            'cost': 1,
            'proxy_cidrs': [],
            'hostname': 'peer-1-ubuntu',
            'stun_info': {
                'udp_nat_type': 1,
                'tcp_nat_type': 0,
                'last_update_time': 1767095990.0,
            },
            'inst_id': 'uuid-1',
            'version': '0.10.0',
        },
        {
            'peer_id': 456,
            'ipv4_addr': '10.144.144.12',
            'next_hop_peer_id': 789,
            'cost': 2,
            'proxy_cidrs': ['192.168.50.0/24'],
            'hostname': 'peer-2-relayed-windows',
            'stun_info': {
                'udp_nat_type': 6,
                'tcp_nat_type': 0,
                'last_update_time': 1767095980.0,
            },
            'inst_id': 'uuid-1',
            'version': '0.9.8',
        },
    ],
    'peers': [
        {
            'peer_id': 123,
            'conns': [
                {
                    'conn_id': 'conn-1',
                    'my_peer_id': 0,
                    'is_client': True,
                    'peer_id': 123,
                    'features': [],
                    'tunnel': {
                        'tunnel_type': 'tcp',
                        'local_addr': {'url': '192.168.1.100:55555'},
                        'remote_addr': {'url': '1.2.3.4:11010'},
                    },
                    'stats': {
                        'rx_bytes': 102400,
                        'tx_bytes': 204800,
                        'rx_packets': 100,
                        'tx_packets': 200,
                        'latency_us': 50000,
                    },
                    'loss_rate': 0.01,
                }
            ],
        }
    ],
    'running': True,
    'error_msg': None,
}


@pytest.fixture
def sample_report() -> dict:
    """Engine running-info report with one direct and one relayed peer."""
    return copy.deepcopy(SAMPLE_REPORT)


@pytest.fixture
def sample_report_json(sample_report) -> str:
    return json.dumps(sample_report)


@pytest.fixture
def profile() -> NetworkProfile:
    """Freshly created profile with all defaults."""
    return NetworkProfile()


# Pytest markers for test organization
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line('markers', 'slow: marks tests that take longer than 5 seconds')
    config.addinivalue_line('markers', 'integration: marks tests that test component integration')
