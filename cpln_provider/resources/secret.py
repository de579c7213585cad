"""
Secret Resource

Polymorphic secret with twelve mutually exclusive data shapes.

Local shapes use snake_case keys; the API stores a single `data` document
whose keys are camelCase for the mapped shapes (aws, ecr, keypair, tls,
nats_account). JSON shapes (gcp, docker, azure_sdk) travel as raw JSON
strings and the remaining shapes pass through with empty values dropped.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from cpln_provider.constants import (
    RESOURCE_SECRET,
    SECRET_DATA_OBJECT_NAMES,
    SECRET_JSON_TYPES,
    SECRET_MAPPED_TYPES,
    SECRET_TYPE_HYPHENATED,
    SECRET_ENV_REFERENCE_FORMAT,
    ECR_REPOS_MIN,
    ECR_REPOS_MAX,
    ERROR_UNKNOWN_SECRET_TYPE,
    ERROR_INVALID_SECRET_DATA,
)
from cpln_provider.exceptions import APIError, ValidationError
from cpln_provider.helpers import (
    description_helper,
    get_tag_changes,
    resource_exists_helper,
    set_base,
    set_self_link,
)
from cpln_provider.models.results import Diagnostics
from cpln_provider.models.secret import Secret
from cpln_provider.resource_data import ResourceData
from cpln_provider.resources.base import BaseResource
from cpln_provider.schema import Field, FieldType, ResourceSchema, is_empty
from cpln_provider.validators import (
    name_validator,
    description_validator,
    tag_validator,
    encoding_validator,
    aws_access_key_validator,
    aws_role_arn_validator,
    empty_validator,
    diff_suppress_json,
    diff_suppress_description,
)

# (local key, remote key, optional); optional keys are omitted when empty
# on create and sent as null on update
AWS_FIELDS = [
    ("secret_key", "secretKey", False),
    ("access_key", "accessKey", False),
    ("role_arn", "roleArn", True),
]

SECRET_FIELD_MAP: Dict[str, List[Tuple[str, str, bool]]] = {
    "aws": AWS_FIELDS,
    "ecr": AWS_FIELDS + [("external_id", "externalId", True)],
    "keypair": [
        ("secret_key", "secretKey", False),
        ("public_key", "publicKey", True),
        ("passphrase", "passphrase", True),
    ],
    "tls": [
        ("key", "key", False),
        ("cert", "cert", True),
        ("chain", "chain", True),
    ],
    "nats_account": [
        ("account_id", "accountId", False),
        ("private_key", "privateKey", False),
    ],
}


def _block(fields: Dict[str, Field]) -> Field:
    return Field(
        FieldType.LIST,
        optional=True,
        max_items=1,
        elem=ResourceSchema(fields),
        exactly_one_of=SECRET_DATA_OBJECT_NAMES,
    )


def _json_field() -> Field:
    return Field(
        FieldType.STRING,
        optional=True,
        sensitive=True,
        exactly_one_of=SECRET_DATA_OBJECT_NAMES,
        diff_suppress=diff_suppress_json,
    )


def _aws_fields(access_key_sensitive: bool) -> Dict[str, Field]:
    return {
        "secret_key": Field(FieldType.STRING, required=True, sensitive=True),
        "access_key": Field(
            FieldType.STRING,
            required=True,
            sensitive=access_key_sensitive,
            validate=aws_access_key_validator,
        ),
        "role_arn": Field(
            FieldType.STRING, optional=True, default="", validate=aws_role_arn_validator
        ),
    }


SECRET_SCHEMA = ResourceSchema(
    {
        "cpln_id": Field(FieldType.STRING, computed=True),
        "name": Field(
            FieldType.STRING, required=True, force_new=True, validate=name_validator
        ),
        "description": Field(
            FieldType.STRING,
            optional=True,
            validate=description_validator,
            diff_suppress=diff_suppress_description,
        ),
        "tags": Field(
            FieldType.MAP, optional=True, elem=FieldType.STRING, validate=tag_validator
        ),
        "self_link": Field(FieldType.STRING, computed=True),
        "dictionary": Field(
            FieldType.MAP,
            optional=True,
            elem=FieldType.STRING,
            exactly_one_of=SECRET_DATA_OBJECT_NAMES,
        ),
        "dictionary_as_envs": Field(FieldType.MAP, computed=True, elem=FieldType.STRING),
        "opaque": _block(
            {
                "payload": Field(FieldType.STRING, required=True, sensitive=True),
                "encoding": Field(
                    FieldType.STRING,
                    optional=True,
                    default="plain",
                    validate=encoding_validator,
                ),
            }
        ),
        "tls": _block(
            {
                "key": Field(FieldType.STRING, required=True, sensitive=True),
                "cert": Field(FieldType.STRING, required=True),
                "chain": Field(FieldType.STRING, optional=True, default=""),
            }
        ),
        "gcp": _json_field(),
        "aws": _block(_aws_fields(access_key_sensitive=True)),
        "ecr": _block(
            {
                **_aws_fields(access_key_sensitive=False),
                "external_id": Field(FieldType.STRING, optional=True),
                "repos": Field(
                    FieldType.SET,
                    required=True,
                    elem=FieldType.STRING,
                    min_items=ECR_REPOS_MIN,
                    max_items=ECR_REPOS_MAX,
                ),
            }
        ),
        "docker": _json_field(),
        "userpass": _block(
            {
                "username": Field(
                    FieldType.STRING, required=True, validate=empty_validator
                ),
                "password": Field(
                    FieldType.STRING,
                    required=True,
                    sensitive=True,
                    validate=empty_validator,
                ),
                "encoding": Field(
                    FieldType.STRING,
                    optional=True,
                    default="plain",
                    validate=encoding_validator,
                ),
            }
        ),
        "keypair": _block(
            {
                "secret_key": Field(FieldType.STRING, required=True, sensitive=True),
                "public_key": Field(FieldType.STRING, optional=True, default=""),
                "passphrase": Field(
                    FieldType.STRING, optional=True, sensitive=True, default=""
                ),
            }
        ),
        "azure_sdk": _json_field(),
        "azure_connector": _block(
            {
                "url": Field(FieldType.STRING, required=True, sensitive=True),
                "code": Field(FieldType.STRING, required=True, sensitive=True),
            }
        ),
        "nats_account": _block(
            {
                "account_id": Field(FieldType.STRING, required=True),
                "private_key": Field(FieldType.STRING, required=True, sensitive=True),
            }
        ),
    }
)


def remote_secret_type(secret_type: str) -> str:
    """azure_sdk -> azure-sdk, azure_connector -> azure-connector, nats_account -> nats-account."""
    return SECRET_TYPE_HYPHENATED.get(secret_type, secret_type)


def local_secret_type(secret_type: Optional[str]) -> Optional[str]:
    for local, remote in SECRET_TYPE_HYPHENATED.items():
        if secret_type == remote:
            return local
    return secret_type


def get_secret_type(d: ResourceData) -> Optional[str]:
    """Return the first secret shape that is set, or None."""
    for name in SECRET_DATA_OBJECT_NAMES:
        _, ok = d.get_ok(name)
        if ok:
            return name
    return None


def _map_to_remote(
    secret_type: str, secret_data: Dict[str, Any], update: bool
) -> Dict[str, Any]:
    data_map: Dict[str, Any] = {}

    for local_key, remote_key, optional in SECRET_FIELD_MAP[secret_type]:
        value = secret_data.get(local_key)
        if not optional:
            data_map[remote_key] = value
        elif not is_empty(value):
            data_map[remote_key] = value
        elif update:
            data_map[remote_key] = None

    if secret_type == "ecr":
        repos = [str(repo) for repo in secret_data.get("repos") or []]
        if repos:
            data_map["repos"] = repos

    return data_map


def build_data(
    secret_type: str, data: Any, secret: Secret, update: bool = False
) -> None:
    """
    Convert a local secret shape into the remote data document.

    Args:
        secret_type: Local shape name (e.g. 'aws', 'azure_sdk')
        data: Local value (JSON string, single-item block list, or mapping)
        secret: Secret being built; receives data, or data_replace on update
        update: Whether empty optional keys must be sent as null

    Raises:
        ValidationError: If data does not fit the secret type
    """
    data_to_set: Any = None
    secret.type = secret_type

    if isinstance(data, dict):
        data = [data]

    if isinstance(data, str):
        if secret_type in SECRET_JSON_TYPES:
            data_to_set = data

    elif isinstance(data, list) and len(data) == 1 and isinstance(data[0], dict):
        secret_data = data[0]

        if secret_type in SECRET_MAPPED_TYPES:
            data_to_set = _map_to_remote(secret_type, secret_data, update)
        else:
            data_to_set = {k: v for k, v in secret_data.items() if not is_empty(v)}

    if data_to_set is None:
        raise ValidationError(ERROR_INVALID_SECRET_DATA.format(type=secret_type))

    if update:
        secret.data_replace = data_to_set
    else:
        secret.data = data_to_set


def parse_data(secret_type: str, data: Any, name: str) -> Dict[str, Any]:
    """
    Convert a remote data document back into local state values.

    Args:
        secret_type: Local shape name
        data: Remote data document
        name: Secret name (used for dictionary env references)

    Returns:
        Mapping of state keys to set, including dictionary_as_envs
    """
    values: Dict[str, Any] = {}

    if secret_type in SECRET_JSON_TYPES:
        values[secret_type] = data if isinstance(data, str) else json.dumps(data)

    elif secret_type == "dictionary":
        secret_data = dict(data)
        values["dictionary"] = secret_data
        values["dictionary_as_envs"] = {
            key: SECRET_ENV_REFERENCE_FORMAT.format(name=name, key=key)
            for key in secret_data
        }

    elif secret_type in SECRET_MAPPED_TYPES:
        block = {
            local_key: data.get(remote_key)
            for local_key, remote_key, _ in SECRET_FIELD_MAP[secret_type]
        }
        if secret_type == "ecr":
            block["repos"] = data.get("repos")
        values[secret_type] = [block]

    else:
        values[secret_type] = [dict(data)]

    return values


def set_secret(d: ResourceData, secret: Optional[Secret]) -> Diagnostics:
    if secret is None:
        d.set_id("")
        return Diagnostics()

    d.set_id(secret.name)
    set_base(d, secret)

    secret_type = local_secret_type(secret.type)

    d.set("dictionary_as_envs", None)

    if secret.data is not None and secret_type in SECRET_DATA_OBJECT_NAMES:
        for name in SECRET_DATA_OBJECT_NAMES:
            if name != secret_type:
                d.set(name, None)

        for key, value in parse_data(secret_type, secret.data, secret.name).items():
            d.set(key, value)

    set_self_link(secret.links, d)
    return Diagnostics()


class SecretResource(BaseResource):
    """Handler for cpln_secret."""

    type_name = RESOURCE_SECRET
    schema = SECRET_SCHEMA

    def create(self, d: ResourceData) -> Diagnostics:
        secret = Secret(name=d.get("name"))
        secret.description = description_helper(secret.name, d.get("description"))
        secret.tags = d.get("tags") or {}

        secret_type = get_secret_type(d)
        if secret_type is None:
            return Diagnostics.error(ERROR_UNKNOWN_SECRET_TYPE)

        try:
            build_data(secret_type, d.get(secret_type), secret, update=False)
        except ValidationError as e:
            return Diagnostics.from_error(e)

        secret.type = remote_secret_type(secret_type)

        try:
            new_secret, _ = self.client.create_secret(secret)
        except APIError as e:
            if e.is_conflict:
                return resource_exists_helper()
            return Diagnostics.from_error(e)

        return set_secret(d, new_secret)

    def read(self, d: ResourceData) -> Diagnostics:
        try:
            secret, _ = self.client.get_secret(d.id())
        except APIError as e:
            if e.is_not_found:
                d.set_id("")
                return Diagnostics()
            return Diagnostics.from_error(e)

        return set_secret(d, secret)

    def update(self, d: ResourceData) -> Diagnostics:
        if not d.has_changes("description", "tags", *SECRET_DATA_OBJECT_NAMES):
            return Diagnostics()

        secret = Secret(name=d.get("name"))
        changed = [name for name in SECRET_DATA_OBJECT_NAMES if d.has_change(name)]

        if d.has_change("description"):
            secret.description = description_helper(secret.name, d.get("description"))

        if d.has_change("tags"):
            secret.tags = get_tag_changes(d)

        secret_type = self._changed_secret_type(d, changed)
        if secret_type is not None:
            try:
                build_data(secret_type, d.get(secret_type), secret, update=True)
            except ValidationError as e:
                return Diagnostics.from_error(e)
            secret.type = remote_secret_type(secret_type)

        try:
            updated_secret, _ = self.client.update_secret(secret)
        except APIError as e:
            return Diagnostics.from_error(e)

        return set_secret(d, updated_secret)

    @staticmethod
    def _changed_secret_type(d: ResourceData, changed: List[str]) -> Optional[str]:
        if len(changed) == 1:
            return changed[0]
        # Type switch: the old shape was cleared and a new one set
        for name in changed:
            _, ok = d.get_ok(name)
            if ok:
                return name
        return None

    def delete(self, d: ResourceData) -> Diagnostics:
        try:
            self.client.delete_secret(d.id())
        except APIError as e:
            return Diagnostics.from_error(e)

        d.set_id("")
        return Diagnostics()
