# encoding: utf-8
"""
Resource lifecycle engine.

``Resource`` implements the host-facing operations (configure, plan, create,
read, update, delete, import) once. Concrete resource types only supply the
hooks ``build_wire``, ``apply_wire`` and ``identifier`` plus some class-level
metadata: the REST path, the sensitive slots, the server-normalised slots.

Every operation returns a ``Response``. Its ``state`` is only set when the
operation finished without error-severity diagnostics, so a failed or
cancelled operation never hands partial state back to the host.
"""

import math
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Type

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from sonarrform import logger
from sonarrform.client import SonarrClient
from sonarrform.constants import (
    CREATE,
    DELETE,
    FIND,
    IMPORT,
    PLAN_CREATE,
    PLAN_DELETE,
    PLAN_NOOP,
    PLAN_REPLACE,
    PLAN_UPDATE,
    PROVIDER_NAME,
    READ,
    SENSITIVE_VALUE,
    SINGLETON_ID,
    UPDATE,
)
from sonarrform.diagnostics import (
    ClientError,
    DataNotFoundError,
    Diagnostics,
    ImportIdentifierError,
    Kind,
    OperationCancelled,
    ResourceNotFound,
    SonarrformError,
)
from sonarrform.sensitive import restore, secrets, snapshot
from sonarrform.utils import normalise_path, redact


@dataclass
class Response:
    state: Optional[BaseModel] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    removed: bool = False

    @property
    def ok(self):
        return not self.diagnostics.has_error()


@dataclass
class Plan:
    action: str
    changes: List[str] = field(default_factory=list)
    prior: Optional[BaseModel] = None
    desired: Optional[BaseModel] = None

    def render(self, sensitive=frozenset()):
        lines = []
        for slot in self.changes:
            before = getattr(self.prior, slot, None) if self.prior is not None else None
            after = getattr(self.desired, slot, None) if self.desired is not None else None
            before, after = _mask(before, slot, sensitive), _mask(after, slot, sensitive)
            lines.append(f"  ~ {slot}: {_show(before)} -> {_show(after)}")
        return "\n".join(lines)


def _mask(value, slot, sensitive):
    if value is None:
        return None
    if slot in sensitive:
        return SENSITIVE_VALUE
    if not isinstance(value, BaseModel):
        return value

    dumped = value.model_dump(exclude_none=True)
    for path in sensitive:
        if not path.startswith(slot + "."):
            continue
        node = dumped
        *parents, leaf = path[len(slot) + 1 :].split(".")
        for part in parents:
            node = node.get(part) if isinstance(node, dict) else None
        if isinstance(node, dict) and leaf in node:
            node[leaf] = SENSITIVE_VALUE
    return dumped


def _show(value):
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return repr(value)


def _is_scalar(value):
    return value is None or isinstance(value, (str, int, float, bool))


def differs(have: Any, want: Any) -> bool:
    """
    Whether ``have`` (state) differs from ``want`` (desired).

    Unset nested slots in ``want`` are server-computed and never differ.
    Sequences of scalars compare as sets; sequences of objects in order.
    """
    if isinstance(want, BaseModel):
        if not isinstance(have, BaseModel):
            return True
        for slot in type(want).model_fields:
            value = getattr(want, slot)
            if value is None and slot not in want.model_fields_set:
                continue
            if differs(getattr(have, slot, None), value):
                return True
        return False

    if isinstance(want, (list, tuple, set, frozenset)):
        if not isinstance(have, (list, tuple, set, frozenset)):
            return True
        if all(_is_scalar(v) for v in want) and all(_is_scalar(v) for v in have):
            return set(have) != set(want)
        if len(have) != len(want):
            return True
        return any(differs(h, w) for h, w in zip(have, want))

    if isinstance(want, dict):
        if not isinstance(have, dict):
            return True
        return any(differs(have.get(key), value) for key, value in want.items())

    if isinstance(want, float) or isinstance(have, float):
        if have is None or want is None:
            return have is not want
        return not math.isclose(have, want, rel_tol=1e-9)

    return have != want


class Resource(ABC):
    """Lifecycle of one resource type against the server."""

    model: Type[BaseModel]
    type_suffix: str
    path: str

    sensitive: FrozenSet[str] = frozenset()
    normalised: FrozenSet[str] = frozenset()
    requires_replace: FrozenSet[str] = frozenset()
    deprecated_aliases: Dict[str, str] = {}

    # Wire attribute used when an import identifier is not an integer
    import_by: Optional[str] = None

    def __init__(self):
        self.client: Optional[SonarrClient] = None

    @property
    def type_name(self):
        return self.metadata()

    def metadata(self, provider_type_name=PROVIDER_NAME):
        return f"{provider_type_name}_{self.type_suffix}"

    def schema(self):
        schema = self.model.model_json_schema()
        properties = schema.get("properties", {})
        for slot in self.sensitive:
            if slot in properties:
                properties[slot]["writeOnly"] = True
                properties[slot]["sensitive"] = True
        properties.get("id", {})["readOnly"] = True
        return schema

    def configure(self, provider_data, diagnostics: Diagnostics):
        # Host runtimes may configure before the provider itself is ready
        if provider_data is None:
            return

        if not isinstance(provider_data, SonarrClient):
            diagnostics.add_error(
                Kind.UNEXPECTED_RESOURCE_CONFIGURE_TYPE,
                f"Expected SonarrClient, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return

        self.client = provider_data

    # Hooks

    @abstractmethod
    def build_wire(self, item) -> dict:
        """Wire resource for ``item``, without touching its id."""

    @abstractmethod
    def apply_wire(self, wire: dict) -> BaseModel:
        """Desired-state record decoded from a wire resource."""

    def identifier(self, item) -> int:
        return item.id

    def check_wire(self, wire: dict, diagnostics: Diagnostics):
        pass

    def normalise(self, slot, value):
        return normalise_path(value)

    # Desired state

    def parse(self, config: Optional[dict], diagnostics: Diagnostics):
        """Validate user configuration into a desired-state record."""
        config = dict(config or {})
        register = _config_secrets(config, self.sensitive)

        for alias, slot in self.deprecated_aliases.items():
            if alias not in config:
                continue
            value = config.pop(alias)
            diagnostics.add_warning(
                Kind.DEPRECATED,
                f"'{alias}' on {self.type_name} is deprecated, use '{slot}' instead",
            )
            config.setdefault(slot, value)

        if "id" in config:
            diagnostics.add_error(Kind.RESOURCE, f"'id' of {self.type_name} is assigned by the server")
            return None

        unknown = sorted(set(config) - set(self.model.model_fields))
        if unknown:
            diagnostics.add_error(
                Kind.RESOURCE,
                f"Unsupported argument(s) for {self.type_name}: {', '.join(unknown)}",
            )
            return None

        try:
            return self.model.model_validate(config)
        except ValidationError as err:
            diagnostics.add_error(
                Kind.RESOURCE,
                f"Invalid configuration for {self.type_name}: {err}",
                secrets=register,
            )
            return None

    def plan(self, prior, desired) -> Plan:
        if prior is None:
            return Plan(PLAN_CREATE, desired=desired)
        if desired is None:
            return Plan(PLAN_DELETE, prior=prior)

        changes = self.changes(prior, desired)
        if any(slot in self.requires_replace for slot in changes):
            action = PLAN_REPLACE
        elif changes:
            action = PLAN_UPDATE
        else:
            action = PLAN_NOOP

        return Plan(action, changes, prior, desired)

    def changes(self, prior, desired) -> List[str]:
        changed = []
        for slot in type(desired).model_fields:
            if slot == "id":
                continue

            want = getattr(desired, slot)
            if want is None and slot not in desired.model_fields_set:
                continue

            have = getattr(prior, slot, None)
            if slot in self.normalised:
                have, want = self.normalise(slot, have), self.normalise(slot, want)

            if differs(have, want):
                changed.append(slot)

        return changed

    # Operations

    def create(self, plan, cancel=None) -> Response:
        response = Response()
        register = snapshot(plan, self.sensitive)

        with self.guard(CREATE, response, register):
            wire = self.build_wire(plan)
            wire["id"] = 0
            result = self.client.create(self.path, wire, cancel)
            response.state = self.decode(result, register, response.diagnostics)
            logger.debug("created %s: %s", self.type_name, self.identifier(response.state))

        return response

    def read(self, state, cancel=None) -> Response:
        response = Response()
        register = snapshot(state, self.sensitive)

        with self.guard(READ, response, register):
            item_id = self.identifier(state)
            try:
                wire = self.client.get(self.path, item_id, cancel)
            except ResourceNotFound:
                logger.warning("%s %s disappeared from the server", self.type_name, item_id)
                response.removed = True
                return response

            response.state = self.decode(wire, register, response.diagnostics)
            self.pin_id(response.state, item_id)
            logger.debug("read %s: %s", self.type_name, item_id)

        return response

    def update(self, plan, state, cancel=None) -> Response:
        response = Response()
        register = snapshot(plan, self.sensitive)

        with self.guard(UPDATE, response, register):
            item_id = self.identifier(state)
            wire = self.build_wire(plan)
            wire["id"] = item_id
            result = self.client.update(self.path, item_id, wire, cancel)
            response.state = self.decode(result, register, response.diagnostics)
            self.pin_id(response.state, item_id)
            logger.debug("updated %s: %s", self.type_name, item_id)

        return response

    def delete(self, state, cancel=None) -> Response:
        response = Response()

        with self.guard(DELETE, response, snapshot(state, self.sensitive)):
            item_id = self.identifier(state)
            try:
                self.client.delete(self.path, item_id, cancel)
            except ResourceNotFound:
                logger.debug("%s %s was already deleted", self.type_name, item_id)
            response.removed = True
            logger.debug("deleted %s: %s", self.type_name, item_id)

        return response

    def import_state(self, identifier: str, cancel=None) -> Response:
        response = Response()

        with self.guard(IMPORT, response, {}):
            stub = self.import_stub(str(identifier), cancel)

        if not response.ok:
            return response

        result = self.read(stub, cancel)
        result.diagnostics.entries[:0] = response.diagnostics.entries
        if result.removed:
            result.diagnostics.add_error(
                Kind.RESOURCE,
                f"Cannot import non-existent remote object: {self.type_name} {identifier}",
            )
            result.removed = False
        logger.debug("imported %s: %s", self.type_name, identifier)
        return result

    def import_stub(self, identifier: str, cancel=None):
        key = identifier.strip()
        if key.isdecimal() and key.isascii():
            return self.model.model_construct(id=int(key))

        if self.import_by is not None and key:
            wire = self.find(self.import_by, key, cancel)
            return self.model.model_construct(id=wire["id"])

        raise ImportIdentifierError(identifier)

    # Helpers

    def find(self, attribute: str, value: Any, cancel=None) -> dict:
        """First wire item of the collection whose ``attribute`` matches ``value``."""
        slot = attribute
        key = to_camel(attribute)

        for wire in self.client.list(self.path, cancel=cancel):
            candidate = wire.get(key)
            if slot in self.normalised:
                if self.normalise(slot, candidate) == self.normalise(slot, value):
                    return wire
            elif candidate == value:
                return wire

        raise DataNotFoundError(self.type_suffix, slot, value)

    def decode(self, wire: dict, register: Dict[str, Any], diagnostics: Diagnostics):
        if not isinstance(wire, dict):
            raise ClientError(f"unexpected server response: {type(wire).__name__}")
        self.check_wire(wire, diagnostics)
        return restore(self.apply_wire(wire), register, self.sensitive)

    @staticmethod
    def pin_id(item, item_id):
        if getattr(item, "id", None) != item_id:
            item.id = item_id

    @contextmanager
    def guard(self, action, response: Response, register: Dict[str, Any]):
        """Turn errors raised inside an operation into diagnostics and drop its state."""
        try:
            yield
        except OperationCancelled as err:
            response.state = None
            response.removed = False
            response.diagnostics.add_error(Kind.CANCELLED, f"{action} {self.type_name}: {err}")
        except ClientError as err:
            _fail(response, Kind.CLIENT, err.describe(action, self.type_name), register)
        except ValidationError as err:
            detail = ClientError(f"unable to decode server response: {err}").describe(action, self.type_name)
            _fail(response, Kind.CLIENT, detail, register)
        except DataNotFoundError as err:
            _fail(response, err.kind, f"Unable to {FIND} {self.type_name}, got error: {err}", register)
        except SonarrformError as err:
            _fail(response, err.kind, str(err), register)


def _fail(response, kind, detail, register):
    response.state = None
    response.removed = False
    hidden = secrets(register)
    response.diagnostics.add_error(kind, detail, secrets=hidden)
    logger.error(redact(detail, hidden, SENSITIVE_VALUE))


def _config_secrets(config: dict, sensitive):
    values = []
    for path in sensitive:
        node = config
        for part in path.split("."):
            node = node.get(part) if isinstance(node, dict) else None
        if node not in (None, ""):
            values.append(str(node))
    return values


class WireModel(BaseModel):
    """Record whose wire form is its own attributes in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ModelResource(Resource):
    """
    Resource whose wire form is its record, camelCased.

    The record model sets ``alias_generator=to_camel`` so validation reads the
    wire form directly and dumping by alias writes it back.
    """

    def build_wire(self, item) -> dict:
        return item.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def apply_wire(self, wire: dict) -> BaseModel:
        return self.model.model_validate(wire)


class SingletonResource(ModelResource):
    """
    Server configuration that exists exactly once, at id 1.

    Create and update both PUT the merge of the current server object with the
    configured attributes. Delete only forgets the resource.
    """

    def fetch(self, cancel=None) -> dict:
        return self.client.get(self.path, cancel=cancel)

    def push(self, wire: dict, cancel=None) -> dict:
        return self.client.update(self.path, SINGLETON_ID, wire, cancel)

    def merge(self, current: dict, wire: dict) -> dict:
        return {**current, **wire, "id": SINGLETON_ID}

    def identifier(self, item) -> int:
        return SINGLETON_ID

    def create(self, plan, cancel=None) -> Response:
        return self.write(CREATE, plan, cancel)

    def update(self, plan, state, cancel=None) -> Response:
        return self.write(UPDATE, plan, cancel)

    def write(self, action, plan, cancel=None) -> Response:
        response = Response()
        register = snapshot(plan, self.sensitive)

        with self.guard(action, response, register):
            self.check_plan(action, plan, response.diagnostics)
            wire = self.merge(self.fetch(cancel), self.build_wire(plan))
            result = self.push(wire, cancel)
            response.state = self.decode(result, register, response.diagnostics)
            self.pin_id(response.state, SINGLETON_ID)
            logger.debug("%sd %s: %s", action, self.type_name, SINGLETON_ID)

        return response

    def check_plan(self, action, plan, diagnostics: Diagnostics):
        pass

    def read(self, state, cancel=None) -> Response:
        response = Response()
        register = snapshot(state, self.sensitive)

        with self.guard(READ, response, register):
            response.state = self.decode(self.fetch(cancel), register, response.diagnostics)
            self.pin_id(response.state, SINGLETON_ID)

        return response

    def delete(self, state, cancel=None) -> Response:
        logger.debug("%s only removed from state, the server keeps its configuration", self.type_name)
        return Response(removed=True)

    def import_stub(self, identifier: str, cancel=None):
        return self.model.model_construct(id=SINGLETON_ID)


class DataSource(ABC):
    """Read-only lookup exposed to the host."""

    model: Type[BaseModel]
    type_suffix: str

    def __init__(self):
        self.client: Optional[SonarrClient] = None

    @property
    def type_name(self):
        return self.metadata()

    def metadata(self, provider_type_name=PROVIDER_NAME):
        return f"{provider_type_name}_{self.type_suffix}"

    def schema(self):
        return self.model.model_json_schema()

    def configure(self, provider_data, diagnostics: Diagnostics):
        if provider_data is None:
            return

        if not isinstance(provider_data, SonarrClient):
            diagnostics.add_error(
                Kind.UNEXPECTED_DATA_SOURCE_CONFIGURE_TYPE,
                f"Expected SonarrClient, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return

        self.client = provider_data

    @abstractmethod
    def lookup(self, query: dict, cancel=None) -> BaseModel:
        """Resolve ``query`` into the data source's state."""

    def read(self, query: Optional[dict] = None, cancel=None) -> Response:
        response = Response()

        try:
            response.state = self.lookup(dict(query or {}), cancel)
            logger.debug("read %s", self.type_name)
        except OperationCancelled as err:
            response.diagnostics.add_error(Kind.CANCELLED, f"{READ} {self.type_name}: {err}")
        except DataNotFoundError as err:
            _fail(response, Kind.DATA_SOURCE, f"Unable to {FIND} {self.type_name}, got error: {err}", {})
        except ClientError as err:
            _fail(response, Kind.CLIENT, err.describe(READ, self.type_name), {})
        except ValidationError as err:
            _fail(response, Kind.DATA_SOURCE, f"Invalid query for {self.type_name}: {err}", {})

        return response


class LookupDataSource(DataSource):
    """
    Single item of a resource's collection, matched on one of ``keys``.

    The first key present in the query wins. Sensitive slots come back unset;
    a data source never knows the plaintext.
    """

    def __init__(self, resource: Resource, keys=("name",), type_suffix=None):
        super().__init__()
        self.resource = resource
        self.keys = tuple(keys)
        self.model = resource.model
        self.type_suffix = type_suffix or resource.type_suffix

    def configure(self, provider_data, diagnostics: Diagnostics):
        super().configure(provider_data, diagnostics)
        self.resource.client = self.client

    def lookup(self, query: dict, cancel=None) -> BaseModel:
        for key in self.keys:
            if query.get(key) is not None:
                value = TypeAdapter(self.model.model_fields[key].annotation).validate_python(query[key])
                wire = self.resource.find(key, value, cancel)
                return self.resource.decode(wire, {}, Diagnostics())

        raise DataNotFoundError(self.type_suffix, " or ".join(self.keys), "")


class ListDataSource(DataSource):
    """Every item of a resource's collection."""

    def __init__(self, resource: Resource, type_suffix: str, model: Type[BaseModel]):
        super().__init__()
        self.resource = resource
        self.type_suffix = type_suffix
        self.model = model
        self.attribute = next(iter(model.model_fields))

    def configure(self, provider_data, diagnostics: Diagnostics):
        super().configure(provider_data, diagnostics)
        self.resource.client = self.client

    def lookup(self, query: dict, cancel=None) -> BaseModel:
        items = [
            self.resource.decode(wire, {}, Diagnostics())
            for wire in self.client.list(self.resource.path, cancel=cancel)
        ]
        return self.model.model_construct(**{self.attribute: items})


class SingletonDataSource(DataSource):
    def __init__(self, resource: SingletonResource, type_suffix=None):
        super().__init__()
        self.resource = resource
        self.model = resource.model
        self.type_suffix = type_suffix or resource.type_suffix

    def configure(self, provider_data, diagnostics: Diagnostics):
        super().configure(provider_data, diagnostics)
        self.resource.client = self.client

    def lookup(self, query: dict, cancel=None) -> BaseModel:
        item = self.resource.decode(self.resource.fetch(cancel), {}, Diagnostics())
        self.resource.pin_id(item, SINGLETON_ID)
        return item
