"""Decode engine status reports into the live status models.

Reports arrive as JSON text (or an already-parsed mapping). Decoding is all
or nothing: any structural mismatch raises ``DecodeError`` and no partial
object is returned. Unknown fields are ignored.
"""

import json
from loguru import logger
from meshnode.models.status import NetworkInstance, NetworkInstanceRunningInfo
from meshnode.status.aggregator import pair
from meshnode.utils.errors import DecodeError
from pydantic import BaseModel, ValidationError
from typing import Any, Mapping, TypeVar


ModelT = TypeVar('ModelT', bound=BaseModel)

Payload = str | bytes | Mapping[str, Any]


def format_location(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as a field path, e.g. routes[0].cost."""
    path = ''
    for part in loc:
        if isinstance(part, int):
            path += f'[{part}]'
        else:
            path += f'.{part}' if path else part
    return path


def _load(payload: Payload) -> dict[str, Any]:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError('', f'report is not valid JSON: {e}') from e

    if not isinstance(payload, Mapping):
        raise DecodeError('', f'report must be a JSON object, got {type(payload).__name__}')
    return dict(payload)


def _validate(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        field = format_location(tuple(first['loc']))
        logger.debug(f'Rejected {model.__name__} report: {field}: {first["msg"]}')
        raise DecodeError(field, first['msg'], errors=errors) from e


def _with_pairs(
    info: NetworkInstanceRunningInfo, data: dict[str, Any]
) -> NetworkInstanceRunningInfo:
    if data.get('peer_route_pairs') is not None:
        return info
    return info.model_copy(update={'peer_route_pairs': pair(info.routes, info.peers)})


def decode_running_info(payload: Payload) -> NetworkInstanceRunningInfo:
    """Decode a running-info report.

    Peer/route pairs are derived from the route and peer tables when the
    report does not carry them.

    Raises:
        DecodeError: On invalid JSON, missing required fields, wrong scalar
            types or out-of-range enum tags
    """
    data = _load(payload)
    info = _validate(NetworkInstanceRunningInfo, data)
    info = _with_pairs(info, data)
    logger.debug(
        f'Decoded report for {info.dev_name}: '
        f'{len(info.routes)} routes, {len(info.peers)} peers, {len(info.events)} events'
    )
    return info


def decode_network_instance(payload: Payload) -> NetworkInstance:
    """Decode an instance handle together with its optional report.

    Raises:
        DecodeError: If the handle or its report is malformed
    """
    data = _load(payload)
    instance = _validate(NetworkInstance, data)
    detail = data.get('detail')
    if instance.detail is not None and isinstance(detail, Mapping):
        instance = instance.model_copy(
            update={'detail': _with_pairs(instance.detail, dict(detail))}
        )
    return instance
