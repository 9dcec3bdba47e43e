# encoding: utf-8
"""
Local runner: reconciles a YAML manifest against a Sonarr server through the
provider, keeping state in a JSON file.

    sonarrform --config sonarr.yaml plan
    sonarrform --config sonarr.yaml apply --parallelism 4
    sonarrform --config sonarr.yaml import tag.media 3
    sonarrform --config sonarr.yaml lookup series title="The Expanse"
    sonarrform --config sonarr.yaml destroy
"""

import argparse
import json
import os
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError

from sonarrform import logger
from sonarrform.client import Cancellation
from sonarrform.config import load_config
from sonarrform.constants import PLAN_CREATE, PLAN_DELETE, PLAN_NOOP, PLAN_REPLACE, PLAN_UPDATE
from sonarrform.diagnostics import Diagnostics, Kind
from sonarrform.engine import Plan
from sonarrform.provider import SonarrProvider
from sonarrform.schema import Manifest

DEFAULT_PARALLELISM = 4


@dataclass
class Outcome:
    address: str
    type_name: Optional[str] = None
    plan: Optional[Plan] = None
    state: Optional[BaseModel] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    # Whether the state entry should be written back (False drops it)
    keep: bool = True


def load_state(path) -> Dict[str, dict]:
    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf8") as stream:
        return json.load(stream).get("resources", {})


def save_state(path, entries: Dict[str, dict]):
    with open(path, "w", encoding="utf8") as stream:
        json.dump({"version": 1, "resources": entries}, stream, indent=2, sort_keys=True)


def dump_state(state: BaseModel) -> dict:
    return state.model_dump(mode="json", exclude_none=True)


class Runner:
    def __init__(self, provider: SonarrProvider, manifest: Manifest, state: Dict[str, dict],
                 parallelism=DEFAULT_PARALLELISM, cancel: Optional[Cancellation] = None):
        self.provider = provider
        self.manifest = manifest
        self.state = state
        self.parallelism = max(1, parallelism)
        self.cancel = cancel or Cancellation()

    def plan(self):
        return self._run(apply=False)

    def apply(self):
        return self._run(apply=True)

    def destroy(self):
        tasks = {address: (self._destroy, address) for address in self.state}
        outcomes = self._execute(tasks)
        self._record(outcomes)
        return outcomes

    def import_resource(self, address, identifier) -> Outcome:
        outcome = Outcome(address)
        block = self.manifest.resources.get(address)
        if block is None:
            outcome.diagnostics.add_error(Kind.RESOURCE, f"{address} is not declared in the manifest")
            return outcome
        if address in self.state:
            outcome.diagnostics.add_error(Kind.RESOURCE, f"{address} is already managed")
            return outcome

        resource = self._resource(block.type, outcome)
        if resource is None:
            return outcome

        response = resource.import_state(identifier, self.cancel)
        outcome.diagnostics.extend(response.diagnostics)
        if response.ok:
            outcome.state = response.state
            self._record([outcome])
        return outcome

    def lookup(self, type_name, query) -> Outcome:
        outcome = Outcome(type_name)
        try:
            data_source = self.provider.data_source(type_name)
        except KeyError:
            outcome.diagnostics.add_error(Kind.DATA_SOURCE, f"Unknown data source type {type_name}")
            return outcome

        outcome.type_name = data_source.type_name
        response = data_source.read(query, self.cancel)
        outcome.diagnostics.extend(response.diagnostics)
        outcome.state = response.state
        return outcome

    # Internals

    def _run(self, apply):
        addresses = set(self.manifest.resources) | set(self.state)
        tasks = {address: (self._reconcile, address, apply) for address in sorted(addresses)}
        outcomes = self._execute(tasks)
        if apply:
            self._record(outcomes)
        return outcomes

    def _execute(self, tasks):
        outcomes = []
        total = len(tasks)

        with ThreadPoolExecutor(max_workers=self.parallelism) as executor:
            future_to_address = {
                executor.submit(*task): address for address, task in tasks.items()
            }

            try:
                for future in as_completed(future_to_address):
                    outcomes.append(future.result())
                    logger.debug("[%s/%s] Processed resources", len(outcomes), total)
            except KeyboardInterrupt:
                logger.warning("Interrupted, cancelling in-flight operations")
                self.cancel.cancel()
                done = {outcome.address for outcome in outcomes}
                outcomes.extend(
                    future.result()
                    for future, address in future_to_address.items()
                    if address not in done
                )

        return sorted(outcomes, key=lambda outcome: outcome.address)

    def _record(self, outcomes):
        for outcome in outcomes:
            if outcome.state is not None:
                self.state[outcome.address] = {
                    "type": outcome.type_name,
                    "state": dump_state(outcome.state),
                }
            elif not outcome.keep:
                self.state.pop(outcome.address, None)

    def _resource(self, type_name, outcome):
        try:
            resource = self.provider.resource(type_name)
        except KeyError:
            outcome.diagnostics.add_error(Kind.RESOURCE, f"Unknown resource type {type_name}")
            return None

        outcome.type_name = resource.type_name
        return resource

    def _prior(self, resource, entry, outcome):
        """Refreshed state of a managed address, None when it is gone."""
        try:
            prior = resource.model.model_validate(entry["state"])
        except ValidationError as err:
            outcome.diagnostics.add_error(Kind.RESOURCE, f"Corrupt state for {outcome.address}: {err}")
            return None

        response = resource.read(prior, self.cancel)
        outcome.diagnostics.extend(response.diagnostics)
        return response.state

    def _destroy(self, address) -> Outcome:
        outcome = Outcome(address)
        entry = self.state[address]
        resource = self._resource(entry["type"], outcome)
        if resource is None:
            return outcome

        prior = self._prior(resource, entry, outcome)
        if outcome.diagnostics.has_error():
            return outcome
        if prior is None:
            outcome.keep = False
            return outcome

        outcome.plan = Plan(PLAN_DELETE, prior=prior)
        response = resource.delete(prior, self.cancel)
        outcome.diagnostics.extend(response.diagnostics)
        if response.removed:
            outcome.keep = False
        return outcome

    def _reconcile(self, address, apply) -> Outcome:
        outcome = Outcome(address)
        block = self.manifest.resources.get(address)
        entry = self.state.get(address)

        if block is None:
            return self._destroy(address) if apply else self._plan_delete(address, entry, outcome)

        resource = self._resource(block.type, outcome)
        if resource is None:
            return outcome

        desired = resource.parse(block.config, outcome.diagnostics)
        if desired is None:
            return outcome

        prior = None
        if entry is not None:
            if entry["type"] != resource.type_name:
                # Type changed: the old item goes first
                if not apply:
                    outcome.plan = Plan(PLAN_REPLACE, ["type"], desired=desired)
                    return outcome
                gone = self._destroy(address)
                outcome.diagnostics.extend(gone.diagnostics)
                if outcome.diagnostics.has_error():
                    return outcome
                outcome.keep = False
            else:
                prior = self._prior(resource, entry, outcome)
                if outcome.diagnostics.has_error():
                    return outcome

        outcome.plan = resource.plan(prior, desired)
        if not apply:
            return outcome

        action = outcome.plan.action
        if action == PLAN_NOOP:
            outcome.state = prior
            return outcome

        if action == PLAN_REPLACE:
            response = resource.delete(prior, self.cancel)
            outcome.diagnostics.extend(response.diagnostics)
            if not response.ok:
                return outcome
            action = PLAN_CREATE

        if action == PLAN_CREATE:
            response = resource.create(desired, self.cancel)
        else:
            response = resource.update(desired, prior, self.cancel)

        outcome.diagnostics.extend(response.diagnostics)
        outcome.state = response.state
        return outcome

    def _plan_delete(self, address, entry, outcome):
        resource = self._resource(entry["type"], outcome)
        if resource is not None:
            prior = self._prior(resource, entry, outcome)
            outcome.plan = Plan(PLAN_DELETE, prior=prior) if prior is not None else Plan(PLAN_NOOP)
        return outcome


def report(outcomes, provider: SonarrProvider):
    """Log plans and diagnostics; True when no outcome carries an error."""
    success = True
    counts = {PLAN_CREATE: 0, PLAN_UPDATE: 0, PLAN_REPLACE: 0, PLAN_DELETE: 0}

    for outcome in outcomes:
        plan = outcome.plan
        if plan is not None and plan.action != PLAN_NOOP:
            counts[plan.action] += 1
            logger.info("%s will be %sd", outcome.address, plan.action)
            sensitive = frozenset()
            if outcome.type_name in provider.resources:
                sensitive = provider.resources[outcome.type_name].sensitive
            rendered = plan.render(sensitive)
            if rendered:
                logger.info(rendered)

        for diagnostic in outcome.diagnostics.warnings:
            logger.warning("%s: %s: %s", outcome.address, diagnostic.summary, diagnostic.detail)
        for diagnostic in outcome.diagnostics.errors:
            success = False
            logger.error("%s: %s: %s", outcome.address, diagnostic.summary, diagnostic.detail)

    logger.info(
        "Plan: %s to create, %s to update, %s to replace, %s to delete",
        counts[PLAN_CREATE],
        counts[PLAN_UPDATE],
        counts[PLAN_REPLACE],
        counts[PLAN_DELETE],
    )
    return success


def parse_query(pairs):
    query = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair}")
        query[key.strip()] = value
    return query


def build_parser():
    parser = argparse.ArgumentParser(description="Reconcile Sonarr configuration from a YAML manifest.")
    parser.add_argument("--config", "--c", default="sonarr.yaml", help="Path to the manifest")
    parser.add_argument("--state", default="sonarrform.state.json", help="Path to the state file")
    parser.add_argument("--parallelism", type=int, default=DEFAULT_PARALLELISM, help="Concurrent operations")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    parser.add_argument("--log-dir", default=None, help="Also log to sonarrform.log in this directory")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("plan", help="Show what apply would change")
    commands.add_parser("apply", help="Create, update and delete resources")
    commands.add_parser("destroy", help="Delete every managed resource")

    importer = commands.add_parser("import", help="Bring an existing item under management")
    importer.add_argument("address", help="Manifest address")
    importer.add_argument("identifier", help="Numeric ID, or the name/label/path of the item")

    lookup = commands.add_parser("lookup", help="Read a data source")
    lookup.add_argument("type", help="Data source type")
    lookup.add_argument("query", nargs="*", help="key=value pairs")

    return parser


def main(argv=None):
    """
    Runner entry point. Parses arguments, loads the manifest and state and
    runs one command.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logger.init_logger(console=True, log_dir=args.log_dir, verbose=args.verbose)

    manifest = load_config(args.config)
    provider = SonarrProvider()

    diagnostics = provider.configure(manifest.provider.model_dump(exclude_none=True))
    for diagnostic in diagnostics:
        logger.error("%s: %s", diagnostic.summary, diagnostic.detail)
    if diagnostics.has_error():
        sys.exit(1)

    runner = Runner(provider, manifest, load_state(args.state), parallelism=args.parallelism)

    if args.command == "lookup":
        try:
            query = parse_query(args.query)
        except argparse.ArgumentTypeError as err:
            parser.error(str(err))
        outcome = runner.lookup(args.type, query)
        if outcome.state is not None:
            print(json.dumps(dump_state(outcome.state), indent=2, sort_keys=True))
        success = report([outcome], provider)
    elif args.command == "import":
        outcome = runner.import_resource(args.address, args.identifier)
        success = report([outcome], provider)
    else:
        outcomes = getattr(runner, args.command)()
        success = report(outcomes, provider)

    if args.command != "plan" and args.command != "lookup":
        save_state(args.state, runner.state)

    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
