"""
Result types for Catenis API calls

Results are returned as ResultRecord, a dict with snake_case attribute
access over the camelCase JSON keys, unless the caller asks for one of the
typed records below. Typed records are pydantic models validated strictly:
a missing required field or a value of the wrong JSON type raises DecodeError.
"""

import re
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from ..exceptions import DecodeError, ErrorCodes


_CAMEL_BOUNDARY = re.compile(r"_([a-z0-9])")

# JSON numbers; integers are kept as they arrive
Number = Union[StrictInt, StrictFloat]


def snake_to_camel(name: str) -> str:
    """Convert ``message_id`` to ``messageId``"""
    return _CAMEL_BOUNDARY.sub(lambda m: m.group(1).upper(), name)


class ResultRecord(dict):
    """
    JSON object returned by the API

    Keys keep their original camelCase form and insertion order; attributes
    may be read in snake_case (``record.message_id`` reads ``messageId``).
    Nested objects are ResultRecords as well.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        super().__init__()
        for key, value in (data or {}).items():
            self[key] = wrap_json(value)

    def __getattr__(self, name: str) -> Any:
        if name in self:
            return self[name]
        camel = snake_to_camel(name)
        if camel in self:
            return self[camel]
        raise AttributeError(f"Result has no field '{name}'")


def wrap_json(value: Any) -> Any:
    """Wrap JSON objects, at any depth, into ResultRecords"""
    if isinstance(value, dict) and not isinstance(value, ResultRecord):
        return ResultRecord(value)
    if isinstance(value, list):
        return [wrap_json(item) for item in value]
    return value


class ApiRecord(BaseModel):
    """Base of typed results, read from camelCase JSON keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _error_path(path: str, loc: tuple) -> str:
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return path


def from_json(result_type: Any, data: Any, path: str = "data") -> Any:
    """
    Build a result of the requested type from decoded JSON data.

    Args:
        result_type: None for a ResultRecord, or a pydantic model (or any
            type pydantic can validate)
        data: Decoded ``data`` member of the success envelope
        path: Location of ``data`` in the response, for error messages

    Returns:
        Result of the requested type

    Raises:
        DecodeError: If the data does not match the requested type
    """
    if result_type is None:
        return wrap_json(data)

    try:
        if isinstance(result_type, type) and issubclass(result_type, BaseModel):
            return result_type.model_validate(data)
        return TypeAdapter(result_type).validate_python(data)
    except ValidationError as e:
        first = e.errors()[0]
        error_path = _error_path(path, first["loc"])
        raise DecodeError(
            f"Invalid {getattr(result_type, '__name__', result_type)} at {error_path}: {first['msg']}",
            ErrorCodes.SHAPE_MISMATCH,
            {"path": error_path, "original_error": str(e)}
        ) from e


class NotificationEvent(str, Enum):
    """Catenis notification events"""
    NEW_MSG_RECEIVED = "new-msg-received"
    SENT_MSG_READ = "sent-msg-read"
    ASSET_RECEIVED = "asset-received"
    ASSET_CONFIRMED = "asset-confirmed"
    FINAL_MSG_PROGRESS = "final-msg-progress"
    ASSET_EXPORT_OUTCOME = "asset-export-outcome"
    ASSET_MIGRATION_OUTCOME = "asset-migration-outcome"
    NF_TOKEN_RECEIVED = "nf-token-received"
    NF_TOKEN_CONFIRMED = "nf-token-confirmed"
    NF_ASSET_ISSUANCE_OUTCOME = "nf-asset-issuance-outcome"
    NF_TOKEN_RETRIEVAL_OUTCOME = "nf-token-retrieval-outcome"
    NF_TOKEN_TRANSFER_OUTCOME = "nf-token-transfer-outcome"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> Union['NotificationEvent', str]:
        """Map an event name to its member; unknown names are returned unchanged"""
        try:
            return cls(name)
        except ValueError:
            return name


class DeviceInfo(ApiRecord):
    device_id: StrictStr
    name: Optional[StrictStr] = None
    prod_unique_id: Optional[StrictStr] = None


class CatenisNodeInfo(ApiRecord):
    ctn_node_index: StrictInt
    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None


class ClientInfo(ApiRecord):
    client_id: StrictStr
    name: Optional[StrictStr] = None


class LogMessageResult(ApiRecord):
    """
    Data returned by Log Message

    Attributes:
        message_id: ID of the logged message, once fully processed
        continuation_token: Token for the next chunk, when logging in chunks
        provisional_message_id: ID to track asynchronous processing
    """
    message_id: Optional[StrictStr] = None
    continuation_token: Optional[StrictStr] = None
    provisional_message_id: Optional[StrictStr] = None


class SendMessageResult(ApiRecord):
    """Data returned by Send Message"""
    message_id: Optional[StrictStr] = None
    continuation_token: Optional[StrictStr] = None
    provisional_message_id: Optional[StrictStr] = None


class MessageInfo(ApiRecord):
    action: StrictStr
    from_: Optional[DeviceInfo] = Field(default=None, alias="from")
    to: Optional[DeviceInfo] = None


class ReadMessageResult(ApiRecord):
    """Data returned by Read Message"""
    msg_info: Optional[MessageInfo] = None
    msg_data: Optional[StrictStr] = None
    continuation_token: Optional[StrictStr] = None
    cached_message_id: Optional[StrictStr] = None


class RetrieveMessageContainerResult(ApiRecord):
    off_chain: Optional[Dict[str, Any]] = None
    blockchain: Optional[Dict[str, Any]] = None
    external_storage: Optional[Dict[str, Any]] = None


class MessageProcessError(ApiRecord):
    code: StrictInt
    message: StrictStr


class MessageProcessProgress(ApiRecord):
    bytes_processed: StrictInt
    done: StrictBool
    success: Optional[StrictBool] = None
    error: Optional[MessageProcessError] = None
    finish_date: Optional[StrictStr] = None


class MessageProcessSuccess(ApiRecord):
    message_id: StrictStr
    continuation_token: Optional[StrictStr] = None


class RetrieveMessageProgressResult(ApiRecord):
    """Data returned by Retrieve Message Progress"""
    action: StrictStr
    progress: MessageProcessProgress
    result: Optional[MessageProcessSuccess] = None


class IssueAssetResult(ApiRecord):
    asset_id: StrictStr


class ReissueAssetResult(ApiRecord):
    total_existent_balance: Number


class TransferAssetResult(ApiRecord):
    remaining_balance: Number


class GetAssetBalanceResult(ApiRecord):
    total: Number
    unconfirmed: Number


class SetPermissionRightsResult(ApiRecord):
    success: StrictBool


class RetrieveDeviceIdentificationInfoResult(ApiRecord):
    """Data returned by Retrieve Device Identification Info"""
    catenis_node: CatenisNodeInfo
    client: ClientInfo
    device: DeviceInfo
