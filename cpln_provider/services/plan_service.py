"""
Plan Service

Drives the resource lifecycle: validate, refresh, plan, apply, destroy
and import, persisting state after every applied change.
"""

from typing import Any, Dict, List, Optional, Tuple

from cpln_provider.client import Client
from cpln_provider.exceptions import ConfigurationError
from cpln_provider.logger import OperationLogger
from cpln_provider.models.results import (
    ApplyResult,
    Diagnostic,
    Diagnostics,
    PlanAction,
    PlannedChange,
)
from cpln_provider.resources import RESOURCE_TYPES, BaseResource, get_resource
from cpln_provider.services.state_service import StateService


def parse_address(address: str) -> Tuple[str, str]:
    """
    Split 'cpln_secret.db' into ('cpln_secret', 'db').

    Raises:
        ConfigurationError: If the address is malformed
    """
    resource_type, sep, local_name = address.partition(".")
    if not sep or not resource_type or not local_name:
        raise ConfigurationError(
            f"Invalid resource address: '{address}'",
            context="Expected <resource_type>.<name>, e.g. cpln_secret.db",
        )
    return resource_type, local_name


def _with_address(diags: Diagnostics, address: str) -> Diagnostics:
    """Prefix each diagnostic's attribute path with the resource address."""
    result = Diagnostics()
    for diag in diags:
        attribute = f"{address}.{diag.attribute}" if diag.attribute else address
        result.append(Diagnostic(diag.severity, diag.summary, diag.detail, attribute))
    return result


class PlanService:
    """
    Resource lifecycle service.

    Responsibilities:
    - Config validation per resource address
    - Refresh of prior state via read
    - Plan computation (create / update / replace / delete / no-op)
    - Ordered apply with state persistence
    - Destroy and import
    """

    def __init__(
        self,
        client: Optional[Client],
        state_service: StateService,
        logger: Optional[OperationLogger] = None,
    ):
        self.client = client
        self.state_service = state_service
        self.logger = logger
        self._refreshed: Dict[str, Optional[Dict[str, Any]]] = {}

    def _log(self, message: str, level: str = "INFO") -> None:
        if self.logger:
            self.logger.log(message, level)

    def _resource_for(self, address: str) -> BaseResource:
        resource_type, _ = parse_address(address)
        return get_resource(resource_type, self.client)

    @staticmethod
    def resource_configs(config_doc: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """
        Extract the 'resources' section of a config document.

        Raises:
            ConfigurationError: If the section is not a mapping of mappings
        """
        resources = config_doc.get("resources") or {}
        if not isinstance(resources, dict):
            raise ConfigurationError("'resources' must be a mapping of address to settings")

        for address, settings in resources.items():
            parse_address(address)
            if not isinstance(settings, dict):
                raise ConfigurationError(
                    f"Resource '{address}' must be a mapping",
                    context=f"Got: {type(settings).__name__}",
                )
        return resources

    def validate(self, config_doc: Dict[str, Any]) -> Diagnostics:
        """Validate every configured resource against its schema."""
        diags = Diagnostics()

        for address, settings in self.resource_configs(config_doc).items():
            resource_type, _ = parse_address(address)
            if resource_type not in RESOURCE_TYPES:
                diags.add_error(
                    "Unsupported resource type",
                    f"Available types: {', '.join(sorted(RESOURCE_TYPES))}",
                    attribute=address,
                )
                continue
            resource = RESOURCE_TYPES[resource_type](self.client)
            diags.extend(_with_address(resource.validate(settings), address))

        return diags

    def refresh(self, address: str) -> Tuple[Optional[Dict[str, Any]], Diagnostics]:
        """
        Re-read a resource from the API.

        Returns:
            Tuple of (refreshed attributes or None if gone, diagnostics)
        """
        prior = self.state_service.get_attributes(address)
        if prior is None:
            return None, Diagnostics()

        resource = self._resource_for(address)
        d = resource.resource_data(state=prior)
        diags = resource.run("read", d)

        if diags.has_error:
            return prior, _with_address(diags, address)

        refreshed = d.state()
        if refreshed is None and self.logger:
            self.logger.warning(f"{address}: no longer exists remotely")
        return refreshed, Diagnostics()

    def plan(self, config_doc: Dict[str, Any]) -> Tuple[List[PlannedChange], Diagnostics]:
        """
        Compute planned changes.

        Args:
            config_doc: Parsed config document

        Returns:
            Tuple of (planned changes in config order then deletions, diagnostics)
        """
        diags = self.validate(config_doc)
        if diags.has_error:
            return [], diags

        configs = self.resource_configs(config_doc)
        changes: List[PlannedChange] = []
        self._refreshed = {}

        for address, settings in configs.items():
            refreshed, refresh_diags = self.refresh(address)
            diags.extend(refresh_diags)
            if refresh_diags.has_error:
                continue

            self._refreshed[address] = refreshed

            if refreshed is None:
                changes.append(PlannedChange(address, PlanAction.CREATE))
                continue

            resource = self._resource_for(address)
            d = resource.resource_data(state=refreshed, config=settings)
            changed = d.changed_fields()
            forced = [name for name in changed if resource.schema[name].force_new]

            if forced:
                changes.append(PlannedChange(address, PlanAction.REPLACE, changed))
            elif changed:
                changes.append(PlannedChange(address, PlanAction.UPDATE, changed))
            else:
                changes.append(PlannedChange(address, PlanAction.NO_OP))

        for address in self.state_service.addresses():
            if address not in configs:
                changes.append(PlannedChange(address, PlanAction.DELETE))

        return changes, diags

    def apply(self, config_doc: Dict[str, Any]) -> ApplyResult:
        """
        Plan and apply, stopping at the first error.

        State is saved after every change so a failed apply keeps the
        progress made so far.
        """
        changes, diags = self.plan(config_doc)
        result = ApplyResult(diagnostics=diags)
        if diags.has_error:
            return result

        configs = self.resource_configs(config_doc)

        for change in changes:
            self._log(f"{change.address}: {change.action.value}")
            step_diags = self._apply_change(change, configs.get(change.address))
            result.diagnostics.extend(_with_address(step_diags, change.address))
            self.state_service.save_state()

            if step_diags.has_error:
                break
            result.applied.append(change)

        return result

    def _apply_change(
        self, change: PlannedChange, settings: Optional[Dict[str, Any]]
    ) -> Diagnostics:
        address = change.address
        resource_type, _ = parse_address(address)
        resource = self._resource_for(address)
        refreshed = self._refreshed.get(address)

        if change.action == PlanAction.NO_OP:
            self.state_service.set_resource(address, resource_type, refreshed)
            return Diagnostics()

        if change.action in (PlanAction.DELETE, PlanAction.REPLACE):
            prior = refreshed if refreshed is not None else self.state_service.get_attributes(address)
            d = resource.resource_data(state=prior)
            diags = resource.run("delete", d)
            if diags.has_error:
                return diags
            self.state_service.remove_resource(address)
            if change.action == PlanAction.DELETE:
                return diags

        if change.action == PlanAction.UPDATE:
            d = resource.resource_data(state=refreshed, config=settings)
            diags = resource.run("update", d)
        else:
            d = resource.resource_data(config=settings)
            diags = resource.run("create", d)

        new_state = d.state()
        if new_state is not None:
            self.state_service.set_resource(address, resource_type, new_state)
        elif not diags.has_error:
            self.state_service.remove_resource(address)
        return diags

    def destroy(self) -> ApplyResult:
        """Delete every resource in state, newest first."""
        result = ApplyResult()

        for address in reversed(self.state_service.addresses()):
            change = PlannedChange(address, PlanAction.DELETE)
            self._log(f"{address}: delete")
            resource = self._resource_for(address)
            d = resource.resource_data(state=self.state_service.get_attributes(address))
            diags = resource.run("delete", d)
            result.diagnostics.extend(_with_address(diags, address))

            if diags.has_error:
                break

            self.state_service.remove_resource(address)
            self.state_service.save_state()
            result.applied.append(change)

        return result

    def import_resource(self, address: str, import_id: str) -> Diagnostics:
        """
        Adopt an existing remote object into state.

        Args:
            address: Resource address to store the state under
            import_id: Provider-specific id (secret name, or
                '<domain_link>_<domain_port>_<prefix>' for domain routes)
        """
        if self.state_service.has_resource(address):
            return Diagnostics.error(
                "Resource already managed",
                f"'{address}' is already in state; remove it before importing",
                attribute=address,
            )

        resource_type, _ = parse_address(address)
        resource = self._resource_for(address)
        d = resource.resource_data(resource_id=import_id)

        diags = resource.import_state(d, import_id)
        if not diags.has_error:
            diags.extend(resource.run("read", d))
        if diags.has_error:
            return _with_address(diags, address)

        new_state = d.state()
        if new_state is None:
            return Diagnostics.error(
                "Cannot import non-existent remote object",
                f"No {resource_type} found with id '{import_id}'",
                attribute=address,
            )

        self.state_service.set_resource(address, resource_type, new_state)
        self.state_service.save_state()
        self._log(f"{address}: imported '{import_id}'")
        return Diagnostics()
