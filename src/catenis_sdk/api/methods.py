"""
Convenience methods for the Catenis API

Thin adapters mapping each catalogue endpoint onto the client's generic
``call``. Nested request objects (message options, asset info, device
descriptors, ...) are passed through as dicts in the service's camelCase
form. Methods return whatever ``call`` returns, so the same mixin serves
the blocking client and, returning awaitables, the asynchronous one.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .models import snake_to_camel


Device = Union[str, Dict[str, Any]]


def compact(**fields: Any) -> Dict[str, Any]:
    """Build a camelCase JSON object, leaving out None values"""
    return {snake_to_camel(name.rstrip("_")): value for name, value in fields.items() if value is not None}


def query_params(**params: Any) -> List[Tuple[str, Any]]:
    """Build camelCase query parameters, in argument order, leaving out None values"""
    result = []
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        result.append((snake_to_camel(name.rstrip("_")), value))
    return result


def split_devices(devices: Optional[Iterable[Device]]) -> Tuple[Optional[List[str]], Optional[List[str]]]:
    """Split device descriptors into Catenis device IDs and product unique IDs"""
    ids, prod_unique_ids = [], []
    for device in devices or []:
        if isinstance(device, dict):
            target = prod_unique_ids if device.get("isProdUniqueId") else ids
            target.append(device["id"])
        else:
            ids.append(device)
    return ids or None, prod_unique_ids or None


class EndpointMethods:
    """Mixin with one method per catalogue endpoint"""

    def call(self, endpoint, path_params=None, query=None, body=None, result_type=None):
        raise NotImplementedError

    # Messages

    def log_message(self, message: Union[str, Dict[str, Any]], options: Optional[Dict[str, Any]] = None):
        """
        Record a message on the blockchain.

        Args:
            message: Message contents, or a chunk as ``{"data", "isFinal", "continuationToken"}``
            options: Log options (``encoding``, ``encrypt``, ``offChain``, ``storage``, ``async``)
        """
        return self.call("log_message", body=compact(message=message, options=options))

    def send_message(self, message: Union[str, Dict[str, Any]], target_device: Dict[str, Any],
                     options: Optional[Dict[str, Any]] = None):
        """Send a message to another device"""
        return self.call("send_message", body=compact(message=message, target_device=target_device,
                                                      options=options))

    def read_message(self, message_id: str, encoding: Optional[str] = None,
                     continuation_token: Optional[str] = None, data_chunk_size: Optional[int] = None,
                     async_: Optional[bool] = None):
        return self.call(
            "read_message",
            path_params={"message_id": message_id},
            query=query_params(encoding=encoding, continuation_token=continuation_token,
                               data_chunk_size=data_chunk_size, async_=async_)
        )

    def retrieve_message_container(self, message_id: str):
        return self.call("retrieve_message_container", path_params={"message_id": message_id})

    def retrieve_message_origin(self, message_id: str, msg_to_sign: Optional[str] = None):
        """Retrieve the origin of a message; does not require credentials"""
        return self.call("retrieve_message_origin", path_params={"message_id": message_id},
                         query=query_params(msg_to_sign=msg_to_sign))

    def retrieve_message_progress(self, message_id: str):
        return self.call("retrieve_message_progress", path_params={"message_id": message_id})

    def list_messages(self, action: Optional[str] = None, direction: Optional[str] = None,
                      from_devices: Optional[Iterable[Device]] = None,
                      to_devices: Optional[Iterable[Device]] = None,
                      read_state: Optional[str] = None, start_date: Optional[str] = None,
                      end_date: Optional[str] = None, limit: Optional[int] = None,
                      skip: Optional[int] = None):
        """
        List messages matching the given filters.

        Devices are Catenis device IDs, or ``{"id", "isProdUniqueId"}`` dicts.
        """
        from_ids, from_prod_ids = split_devices(from_devices)
        to_ids, to_prod_ids = split_devices(to_devices)
        return self.call("list_messages", query=query_params(
            action=action,
            direction=direction,
            from_device_ids=from_ids,
            from_device_prod_unique_ids=from_prod_ids,
            to_device_ids=to_ids,
            to_device_prod_unique_ids=to_prod_ids,
            read_state=read_state,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            skip=skip
        ))

    # Assets

    def issue_asset(self, asset_info: Dict[str, Any], amount: float,
                    holding_device: Optional[Dict[str, Any]] = None):
        return self.call("issue_asset", body=compact(asset_info=asset_info, amount=amount,
                                                     holding_device=holding_device))

    def reissue_asset(self, asset_id: str, amount: float, holding_device: Optional[Dict[str, Any]] = None):
        return self.call("reissue_asset", path_params={"asset_id": asset_id},
                         body=compact(amount=amount, holding_device=holding_device))

    def transfer_asset(self, asset_id: str, amount: float, receiving_device: Dict[str, Any]):
        return self.call("transfer_asset", path_params={"asset_id": asset_id},
                         body=compact(amount=amount, receiving_device=receiving_device))

    def retrieve_asset_info(self, asset_id: str):
        return self.call("retrieve_asset_info", path_params={"asset_id": asset_id})

    def get_asset_balance(self, asset_id: str):
        return self.call("get_asset_balance", path_params={"asset_id": asset_id})

    def list_owned_assets(self, limit: Optional[int] = None, skip: Optional[int] = None):
        return self.call("list_owned_assets", query=query_params(limit=limit, skip=skip))

    def list_issued_assets(self, limit: Optional[int] = None, skip: Optional[int] = None):
        return self.call("list_issued_assets", query=query_params(limit=limit, skip=skip))

    def retrieve_asset_issuance_history(self, asset_id: str, start_date: Optional[str] = None,
                                        end_date: Optional[str] = None, limit: Optional[int] = None,
                                        skip: Optional[int] = None):
        return self.call(
            "retrieve_asset_issuance_history",
            path_params={"asset_id": asset_id},
            query=query_params(start_date=start_date, end_date=end_date, limit=limit, skip=skip)
        )

    def list_asset_holders(self, asset_id: str, limit: Optional[int] = None, skip: Optional[int] = None):
        return self.call("list_asset_holders", path_params={"asset_id": asset_id},
                         query=query_params(limit=limit, skip=skip))

    # Asset export and migration

    def export_asset(self, asset_id: str, foreign_blockchain: str, token: Dict[str, Any],
                     options: Optional[Dict[str, Any]] = None):
        """Export an asset to a foreign blockchain (e.g. ``ethereum``)"""
        return self.call("export_asset",
                         path_params={"asset_id": asset_id, "foreign_blockchain": foreign_blockchain},
                         body=compact(token=token, options=options))

    def asset_export_outcome(self, asset_id: str, foreign_blockchain: str):
        return self.call("asset_export_outcome",
                         path_params={"asset_id": asset_id, "foreign_blockchain": foreign_blockchain})

    def list_exported_assets(self, foreign_blockchain: Optional[str] = None, token_symbol: Optional[str] = None,
                             status: Optional[List[str]] = None, negate_status: Optional[bool] = None,
                             start_date: Optional[str] = None, end_date: Optional[str] = None,
                             limit: Optional[int] = None, skip: Optional[int] = None):
        return self.call("list_exported_assets", query=query_params(
            foreign_blockchain=foreign_blockchain,
            token_symbol=token_symbol,
            status=status,
            negate_status=negate_status,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            skip=skip
        ))

    def migrate_asset(self, asset_id: str, foreign_blockchain: str, migration: Union[str, Dict[str, Any]],
                      amount: Optional[float] = None):
        """
        Migrate an amount of an exported asset to or from a foreign blockchain.

        Args:
            asset_id: Asset ID
            foreign_blockchain: Foreign blockchain name
            migration: Migration info dict (``direction``, ``amount``, ``destAddress``),
                or the ID of a migration to reprocess
            amount: Amount, only used when reprocessing is not intended
        """
        if isinstance(migration, dict) and amount is not None:
            migration = dict(migration, amount=amount)
        return self.call("migrate_asset",
                         path_params={"asset_id": asset_id, "foreign_blockchain": foreign_blockchain},
                         body={"migration": migration})

    def asset_migration_outcome(self, migration_id: str):
        return self.call("asset_migration_outcome", path_params={"migration_id": migration_id})

    def list_asset_migrations(self, foreign_blockchain: Optional[str] = None, direction: Optional[str] = None,
                              status: Optional[List[str]] = None, negate_status: Optional[bool] = None,
                              start_date: Optional[str] = None, end_date: Optional[str] = None,
                              limit: Optional[int] = None, skip: Optional[int] = None):
        return self.call("list_asset_migrations", query=query_params(
            foreign_blockchain=foreign_blockchain,
            direction=direction,
            status=status,
            negate_status=negate_status,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            skip=skip
        ))

    # Non-fungible assets and tokens

    def issue_non_fungible_asset(self, issuance_info: Dict[str, Any],
                                 non_fungible_tokens: Optional[List[Optional[Dict[str, Any]]]] = None,
                                 is_final: Optional[bool] = None):
        """
        Issue a new non-fungible asset, optionally in several calls.

        Token metadata and contents keep the key order given by the caller.

        Args:
            issuance_info: ``{"assetInfo", "encryptNFTContents", "holdingDevices", "async"}``,
                or ``{"continuationToken"}`` for a continuation call
            non_fungible_tokens: Tokens to issue; None entries keep list positions
            is_final: Whether this is the final call of the issuance
        """
        body = dict(issuance_info)
        body.update(compact(non_fungible_tokens=non_fungible_tokens, is_final=is_final))
        return self.call("issue_non_fungible_asset", body=body)

    def reissue_non_fungible_asset(self, asset_id: str, issuance_info: Dict[str, Any],
                                   non_fungible_tokens: Optional[List[Optional[Dict[str, Any]]]] = None,
                                   is_final: Optional[bool] = None):
        body = dict(issuance_info)
        body.update(compact(non_fungible_tokens=non_fungible_tokens, is_final=is_final))
        return self.call("reissue_non_fungible_asset", path_params={"asset_id": asset_id}, body=body)

    def retrieve_non_fungible_asset_issuance_progress(self, issuance_id: str):
        return self.call("retrieve_non_fungible_asset_issuance_progress",
                         path_params={"issuance_id": issuance_id})

    def retrieve_non_fungible_token(self, token_id: str, retrieve_contents: Optional[bool] = None,
                                    contents_only: Optional[bool] = None, contents_encoding: Optional[str] = None,
                                    data_chunk_size: Optional[int] = None, async_: Optional[bool] = None,
                                    continuation_token: Optional[str] = None):
        return self.call(
            "retrieve_non_fungible_token",
            path_params={"token_id": token_id},
            query=query_params(retrieve_contents=retrieve_contents, contents_only=contents_only,
                               contents_encoding=contents_encoding, data_chunk_size=data_chunk_size,
                               async_=async_, continuation_token=continuation_token)
        )

    def retrieve_non_fungible_token_retrieval_progress(self, token_id: str, retrieval_id: str):
        return self.call("retrieve_non_fungible_token_retrieval_progress",
                         path_params={"token_id": token_id, "retrieval_id": retrieval_id})

    def transfer_non_fungible_token(self, token_id: str, receiving_device: Dict[str, Any],
                                    async_: Optional[bool] = None):
        return self.call("transfer_non_fungible_token", path_params={"token_id": token_id},
                         body=compact(receiving_device=receiving_device, async_=async_))

    def retrieve_non_fungible_token_transfer_progress(self, token_id: str, transfer_id: str):
        return self.call("retrieve_non_fungible_token_transfer_progress",
                         path_params={"token_id": token_id, "transfer_id": transfer_id})

    # Permissions

    def list_permission_events(self):
        return self.call("list_permission_events")

    def retrieve_permission_rights(self, event_name: str):
        return self.call("retrieve_permission_rights", path_params={"event_name": event_name})

    def set_permission_rights(self, event_name: str, rights: Dict[str, Any]):
        """Set permission rights (``system``, ``catenisNode``, ``client``, ``device``) for an event"""
        return self.call("set_permission_rights", path_params={"event_name": event_name}, body=rights)

    def check_effective_permission_right(self, event_name: str, device_id: str,
                                         is_prod_unique_id: Optional[bool] = None):
        return self.call("check_effective_permission_right",
                         path_params={"event_name": event_name, "device_id": device_id},
                         query=query_params(is_prod_unique_id=is_prod_unique_id))

    # Devices and notifications

    def retrieve_device_identification_info(self, device_id: str, is_prod_unique_id: Optional[bool] = None):
        return self.call("retrieve_device_identification_info", path_params={"device_id": device_id},
                         query=query_params(is_prod_unique_id=is_prod_unique_id))

    def list_notification_events(self):
        return self.call("list_notification_events")
