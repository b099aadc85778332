"""Unit tests for the status report decoder."""

import json
import pytest
from datetime import datetime, timezone
from meshnode.models.status import NatType, NetworkInstanceRunningInfo
from meshnode.status.decoder import (
    decode_network_instance,
    decode_running_info,
    format_location,
)
from meshnode.utils.errors import DecodeError, ErrorCodes


class TestDecodeRunningInfo:
    """Test decoding a full running-info report."""

    def test_decode_sample(self, sample_report_json):
        """Test the sample report decodes completely."""
        info = decode_running_info(sample_report_json)

        assert isinstance(info, NetworkInstanceRunningInfo)
        assert info.dev_name == 'utun10'
        assert info.running is True
        assert info.error_msg is None

        node = info.my_node_info
        assert str(node.virtual_ipv4) == '10.144.144.10/24'
        assert node.hostname == 'my-macbook-pro'
        assert str(node.ips.public_ipv4) == '8.8.8.8'
        assert [str(ip) for ip in node.ips.interface_ipv4s] == ['192.168.1.100']
        assert node.ips.public_ipv6 is None
        assert node.stun_info.udp_nat_type is NatType.FULL_CONE
        assert [str(url) for url in node.listeners] == [
            'tcp://0.0.0.0:11010',
            'udp://0.0.0.0:11010',
        ]

    def test_decode_mapping_and_bytes(self, sample_report, sample_report_json):
        """Test parsed mappings and raw bytes decode the same."""
        from_mapping = decode_running_info(sample_report)
        from_bytes = decode_running_info(sample_report_json.encode())

        assert from_mapping == from_bytes

    def test_routes_and_peers(self, sample_report):
        """Test route and peer tables."""
        info = decode_running_info(sample_report)

        direct, relayed = info.routes
        assert direct.is_direct is True
        assert direct.nat_type is NatType.OPEN_INTERNET
        assert relayed.is_direct is False
        assert relayed.nat_type is NatType.SYMMETRIC
        assert relayed.proxy_cidrs == ['192.168.50.0/24']

        peer = info.find_peer(123)
        assert peer.rx_bytes == 102400
        assert peer.tx_bytes == 204800
        assert peer.latency_ms == 50.0
        assert peer.loss_rate == pytest.approx(0.01)
        assert peer.tunnel_types == ['tcp']
        assert info.find_peer(456) is None

    def test_derives_pairs(self, sample_report):
        """Test pairs are built from the tables when absent."""
        info = decode_running_info(sample_report)

        assert [p.peer_id for p in info.peer_route_pairs] == [123, 456]
        assert info.peer_route_pairs[0].is_connected is True
        assert info.peer_route_pairs[0].latency_ms == 50.0
        assert info.peer_route_pairs[1].peer is None
        assert info.peer_route_pairs[1].tunnel_types == []

    def test_keeps_sent_pairs(self, sample_report):
        """Test pairs sent by the engine are kept as sent."""
        sample_report['peer_route_pairs'] = [{'route': sample_report['routes'][1], 'peer': None}]

        info = decode_running_info(sample_report)

        assert [p.peer_id for p in info.peer_route_pairs] == [456]

    def test_null_pairs_are_derived(self, sample_report):
        """Test a null pair list is treated like an absent one."""
        sample_report['peer_route_pairs'] = None

        info = decode_running_info(sample_report)

        assert [p.peer_id for p in info.peer_route_pairs] == [123, 456]
        assert info.peer_route_pairs[1].peer is None

    def test_unknown_fields_ignored(self, sample_report):
        """Test fields added by a newer engine are ignored."""
        sample_report['feature_flags'] = {'new': True}
        sample_report['my_node_info']['region'] = 'eu-west'
        sample_report['routes'][0]['path_latency'] = 12

        info = decode_running_info(sample_report)

        assert info.routes[0].cost == 1

    def test_optional_fields_absent(self, sample_report):
        """Test absent optionals decode to None rather than zero values."""
        del sample_report['my_node_info']['ips']
        del sample_report['my_node_info']['vpn_portal_cfg']
        del sample_report['routes'][1]['stun_info']
        del sample_report['error_msg']

        info = decode_running_info(sample_report)

        assert info.my_node_info.ips is None
        assert info.my_node_info.vpn_portal_cfg is None
        assert info.routes[1].stun_info is None
        assert info.routes[1].nat_type is None
        assert info.error_msg is None

    def test_zero_ipv6_is_data(self, sample_report):
        """Test an all-zero IPv6 address is kept, not treated as absent."""
        zero = {'part1': 0, 'part2': 0, 'part3': 0, 'part4': 0}
        sample_report['my_node_info']['ips']['public_ipv6'] = zero

        info = decode_running_info(sample_report)

        assert info.my_node_info.ips.public_ipv6 is not None
        assert str(info.my_node_info.ips.public_ipv6) == '::'


class TestEvents:
    """Test event log entries."""

    def test_kind_and_raw(self, sample_report):
        """Test the tag is extracted and the text kept verbatim."""
        info = decode_running_info(sample_report)

        event = info.events[0]
        assert event.kind == 'PeerAdded'
        assert event.raw == sample_report['events'][0]
        assert event.body == {'PeerAdded': 123}
        assert event.time == datetime(2025, 12, 30, 12, 0, 5, tzinfo=timezone.utc)

    def test_chronological_order(self, sample_report):
        """Test events sort oldest first while the sent order is kept."""
        info = decode_running_info(sample_report)

        assert [e.kind for e in info.events] == ['PeerAdded', 'TunDeviceReady']
        assert [e.kind for e in info.chronological_events] == ['TunDeviceReady', 'PeerAdded']

    def test_unit_event(self, sample_report):
        """Test events without a payload use the bare tag."""
        sample_report['events'] = ['{"time":"2025-12-30T12:00:00Z","event":"VpnPortalStarted"}']

        assert decode_running_info(sample_report).events[0].kind == 'VpnPortalStarted'

    def test_mixed_offsets_sort(self, sample_report):
        """Test timestamps without an offset are read as UTC and sort with the rest."""
        sample_report['events'] = [
            '{"time":"2025-12-30T12:00:05Z","event":{"PeerAdded":123}}',
            '{"time":"2025-12-30T12:00:00","event":{"TunDeviceReady":"utun10"}}',
        ]

        info = decode_running_info(sample_report)

        assert info.events[1].time == datetime(2025, 12, 30, 12, 0, 0, tzinfo=timezone.utc)
        assert [e.kind for e in info.chronological_events] == ['TunDeviceReady', 'PeerAdded']

    def test_event_without_time(self, sample_report):
        """Test an event needs a timestamp."""
        sample_report['events'] = ['{"event":{"PeerAdded":1}}']

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'events[0].time'

    def test_event_not_json(self, sample_report):
        """Test a malformed event rejects the report."""
        sample_report['events'].append('not json')

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'events[2]'


class TestDecodeErrors:
    """Test structural mismatches."""

    def test_missing_my_node_info(self, sample_report):
        """Test a missing required section names the field."""
        del sample_report['my_node_info']

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'my_node_info'
        assert exc_info.value.reason == 'Field required'
        assert exc_info.value.error_code == ErrorCodes.DECODE_FAILED

    def test_wrong_scalar_type(self, sample_report):
        """Test a string where an integer belongs is rejected."""
        sample_report['routes'][0]['cost'] = '1'

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'routes[0].cost'

    def test_enum_out_of_range(self, sample_report):
        """Test an unknown NAT type tag is rejected."""
        sample_report['my_node_info']['stun_info']['udp_nat_type'] = 42

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'my_node_info.stun_info.udp_nat_type'

    @pytest.mark.parametrize('tag', ['3', 3.0, True, None])
    def test_enum_wrong_type(self, sample_report, tag):
        """Test NAT type tags must be integers, not coercible lookalikes."""
        sample_report['routes'][0]['stun_info']['tcp_nat_type'] = tag

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'routes[0].stun_info.tcp_nat_type'

    def test_all_errors_kept(self, sample_report):
        """Test every validation error is attached to the exception."""
        del sample_report['dev_name']
        sample_report['running'] = 'yes'

        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(sample_report)

        assert exc_info.value.field == 'dev_name'
        assert len(exc_info.value.errors) == 2

    @pytest.mark.parametrize('payload', ['{not json', '[1, 2]', b'\xff\xfe', '42'])
    def test_not_an_object(self, payload):
        """Test payloads that are not JSON objects."""
        with pytest.raises(DecodeError) as exc_info:
            decode_running_info(payload)

        assert exc_info.value.field == ''


class TestDecodeNetworkInstance:
    """Test decoding instance handles."""

    def test_with_detail(self, sample_report):
        """Test the embedded report is decoded with derived pairs."""
        payload = json.dumps(
            {'instance_id': 'abc', 'running': True, 'error_msg': '', 'detail': sample_report}
        )

        instance = decode_network_instance(payload)

        assert instance.id == 'abc'
        assert instance.has_report is True
        assert len(instance.detail.peer_route_pairs) == 2

    def test_without_detail(self):
        """Test an instance without a report yet."""
        instance = decode_network_instance(
            {'instance_id': 'abc', 'running': False, 'error_msg': 'tun device busy'}
        )

        assert instance.has_report is False
        assert instance.error_msg == 'tun device busy'

    def test_bad_detail(self, sample_report):
        """Test errors inside the report are located under detail."""
        del sample_report['routes']

        with pytest.raises(DecodeError) as exc_info:
            decode_network_instance(
                {'instance_id': 'abc', 'running': True, 'error_msg': '', 'detail': sample_report}
            )

        assert exc_info.value.field == 'detail.routes'


class TestFormatLocation:
    """Test error location rendering."""

    @pytest.mark.parametrize(
        'loc,expected',
        [
            (('my_node_info',), 'my_node_info'),
            (('routes', 0, 'cost'), 'routes[0].cost'),
            (('peers', 1, 'conns', 0, 'stats', 'rx_bytes'), 'peers[1].conns[0].stats.rx_bytes'),
            ((), ''),
        ],
    )
    def test_paths(self, loc, expected):
        """Test tuple locations render as field paths."""
        assert format_location(loc) == expected
