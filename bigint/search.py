"""Counterexample search: checks the octet engine against the contract.

This module runs independently of the test suite.  It systematically
searches for:

1. Postcondition violations: inputs where the implementation doesn't
   match the contract's expected outcome.
2. Flag violations: inputs that should raise the overflow/err flag but
   don't.
3. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
4. Property violations: relationships across operations that fail for
   some input combination.

Values are built with the primitive constructors, so the widths that can
be probed are 1, 2, 4 and 8 octets.

Run directly::

    python -m bigint.search
"""
from __future__ import annotations

import itertools
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from bigint.base import OctetInt
from bigint.contract import IntContract, build_contract, outcome_flag
from bigint.results import DivResult, Overflowing
from bigint.signed import SignedBigInt
from bigint.unsigned import UnsignedBigInt

log = logging.getLogger(__name__)

PROBE_WIDTHS = (1, 2, 4, 8)


# ---------------------------------------------------------------------------
# Probe: runs one operation on ints through the real types
# ---------------------------------------------------------------------------

class Probe:
    """Adapter between the int-level contract and the octet types."""

    def __init__(self, contract: IntContract) -> None:
        if contract.octets not in PROBE_WIDTHS:
            raise ValueError(
                f"cannot probe {contract.octets}-octet values; "
                f"choose one of {PROBE_WIDTHS}"
            )
        self.contract = contract
        kind = SignedBigInt if contract.signed else UnsignedBigInt
        self._make = getattr(kind, f"make{contract.bits}")

    def value(self, n: int) -> OctetInt:
        return self._make(n)

    def run(self, op_name: str, *args: int) -> Any:
        kinds = self.contract.operations[op_name].operands
        first, *rest = (
            self.value(a) if k == "value" else a for k, a in zip(kinds, args)
        )
        return self.observe(getattr(first, op_name)(*rest))

    @staticmethod
    def observe(result: Any) -> Any:
        """Turn an operation's result into plain ints (flags kept)."""
        if isinstance(result, Overflowing):
            return Overflowing(int(result.val), result.overflow)
        if isinstance(result, DivResult):
            return DivResult(int(result.quot), int(result.rem), result.err)
        if isinstance(result, OctetInt):
            return int(result)
        return result


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found; all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Input domains
# ---------------------------------------------------------------------------

def _inputs(
    contract: IntContract,
    kinds: Sequence[str],
    values: Sequence[int],
) -> Iterable[tuple[int, ...]]:
    domains = [
        values if k == "value" else contract.counts() for k in kinds
    ]
    return itertools.product(*domains)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    probe: Probe,
    values: Sequence[int],
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every input combination."""
    contract = probe.contract
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op in contract.operations.items():
        for args in _inputs(contract, op.operands, values):
            # Skip inputs that are supposed to raise
            if any(ec.trigger(*args) for ec in op.error_conditions):
                checks += 1
                continue

            try:
                outcome = probe.run(op_name, *args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=args,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                checks += 1
                continue

            for post in op.postconditions:
                if not post.check(*args, outcome):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=args,
                        expected=post.description,
                        actual=f"outcome={outcome}",
                        description=f"Postcondition '{post.name}' violated",
                    ))
            checks += 1

    return cxs, checks


def search_flag_violations(
    probe: Probe,
    values: Sequence[int],
) -> tuple[list[Counterexample], int]:
    """Verify every flag condition raises its flag."""
    contract = probe.contract
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op in contract.operations.items():
        if not op.flag_conditions:
            continue
        for args in _inputs(contract, op.operands, values):
            if any(ec.trigger(*args) for ec in op.error_conditions):
                continue
            for fc in op.flag_conditions:
                if not fc.trigger(*args):
                    continue
                checks += 1
                outcome = probe.run(op_name, *args)
                if not outcome_flag(outcome, fc.flag):
                    cxs.append(Counterexample(
                        category="missing_flag",
                        operation=op_name,
                        inputs=args,
                        expected=f"{fc.flag} set",
                        actual=f"outcome={outcome}",
                        description=(
                            f"Flag condition '{fc.name}' should have "
                            f"triggered but didn't"
                        ),
                    ))

    return cxs, checks


def search_error_condition_violations(
    probe: Probe,
    values: Sequence[int],
) -> tuple[list[Counterexample], int]:
    """Verify every error condition raises the right exception."""
    contract = probe.contract
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op in contract.operations.items():
        for args in _inputs(contract, op.operands, values):
            for ec in op.error_conditions:
                if not ec.trigger(*args):
                    continue
                checks += 1
                try:
                    outcome = probe.run(op_name, *args)
                    cxs.append(Counterexample(
                        category="missing_error",
                        operation=op_name,
                        inputs=args,
                        expected=f"{ec.exception.__name__}",
                        actual=f"outcome={outcome}",
                        description=(
                            f"Error condition '{ec.name}' should have "
                            f"triggered but didn't"
                        ),
                    ))
                except ec.exception:
                    pass  # expected
                except Exception as e:
                    cxs.append(Counterexample(
                        category="wrong_error",
                        operation=op_name,
                        inputs=args,
                        expected=f"{ec.exception.__name__}",
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))

    return cxs, checks


def search_property_violations(
    probe: Probe,
    values: Sequence[int],
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property over the input domain."""
    contract = probe.contract
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        for args in _inputs(contract, prop.kinds, values):
            checks += 1
            if not prop.check(probe, *args):
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=args,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def sample_values(contract: IntContract, stride: int) -> list[int]:
    """Edge values plus every ``stride``-th value of the range."""
    bounds = contract.bounds
    edges = [bounds.lo, bounds.lo + 1, -2, -1, 0, 1, 2, bounds.hi - 1,
             bounds.hi]
    picked = set(v for v in edges if bounds.contains(v))
    picked.update(range(bounds.lo, bounds.hi + 1, stride))
    return sorted(picked)


def run_search(
    octets: int,
    signed: bool,
    values: Sequence[int] | None = None,
) -> SearchReport:
    """Run the complete counterexample search for one configuration.

    ``values`` defaults to every representable value, which is only
    practical for one-octet widths.
    """
    contract = build_contract(octets, signed)
    probe = Probe(contract)
    if values is None:
        values = contract.bounds.all_values()
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_flag_violations,
        search_error_condition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(probe, values)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    log.debug("searched %d-octet %s values: %d checks, %d counterexamples",
              octets, "signed" if signed else "unsigned",
              report.checks_run, len(report.counterexamples))
    return report


def configurations() -> list[tuple[str, int, bool, list[int]]]:
    """Name, width, signedness and sampled values for each search run."""
    small = build_contract(1, True), build_contract(1, False)
    return [
        ("signed   / 1 octet ", 1, True, sample_values(small[0], 3)),
        ("unsigned / 1 octet ", 1, False, sample_values(small[1], 3)),
        ("signed   / 2 octets", 2, True,
         sample_values(build_contract(2, True), 4099)),
        ("unsigned / 2 octets", 2, False,
         sample_values(build_contract(2, False), 4099)),
    ]


def main() -> None:
    """Run the counterexample search across several configurations."""
    logging.basicConfig(level=logging.INFO)
    all_passed = True
    for name, octets, signed, values in configurations():
        print(f"\n--- Configuration: {name} ---")
        report = run_search(octets, signed, values)
        log.info("%s: %d checks, %d counterexamples", name.strip(),
                 report.checks_run, len(report.counterexamples))
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
