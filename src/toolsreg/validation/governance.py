"""Governance checks of category files against the shared taxonomy.

Every rule is checked and reported independently, so one tool can produce
several violations. Nothing here raises for bad registry data: problems are
accumulated and the caller decides pass or fail once every category has been
checked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence, Tuple

from toolsreg.collation import locale_compare
from toolsreg.config import DEFAULT_MIN_TOOLS
from toolsreg.errors import RegistryFileError
from toolsreg.io.json_files import read_json
from toolsreg.logging import get_logger
from toolsreg.models import ToolRecord
from toolsreg.paths import category_tools_path
from toolsreg.taxonomy import TaxonomyStore
from toolsreg.validation.base import ValidationReport, Violation, tool_label
from toolsreg.validation.schema import check_tool

logger = get_logger("validation")


def validate_tool(taxonomy: TaxonomyStore, category: str, record: Any, label: str) -> List[Violation]:
    """Validate one record: structure first, then every taxonomy rule."""
    tool, schema_violations = check_tool(record)
    if tool is None:
        return [Violation(category, label, violation.describe()) for violation in schema_violations]

    violations: List[Violation] = []
    for message in _governance_messages(taxonomy, category, tool):
        violations.append(Violation(category, label, message))
    return violations


def _governance_messages(taxonomy: TaxonomyStore, category: str, tool: ToolRecord) -> Iterable[str]:
    if tool.category != category:
        yield f"Category mismatch: expected '{category}', got '{tool.category}'"

    seen = set()
    for capability in tool.capabilities:
        if capability in seen:
            # An unknown token is reported once, however often it repeats.
            if capability in taxonomy.capabilities:
                yield f"Duplicate capability: {capability}"
            continue
        seen.add(capability)
        if capability not in taxonomy.capabilities:
            yield f"Unknown capability: {capability}"

    if tool.pricing.model not in taxonomy.pricing_models:
        yield f"Unknown pricing model: {tool.pricing.model}"

    for flag in tool.compliance or {}:
        if flag not in taxonomy.compliance_flags:
            yield f"Unknown compliance flag: {flag}"

    minimum = tool.pricing.min_monthly_usd
    maximum = tool.pricing.max_monthly_usd
    if minimum is not None and maximum is not None and minimum > maximum:
        yield f"Invalid price range: min ({minimum}) > max ({maximum})"


def check_population(
    taxonomy: TaxonomyStore,
    category: str,
    count: int,
    *,
    default_min_tools: int = DEFAULT_MIN_TOOLS,
) -> Optional[Violation]:
    if not taxonomy.is_live(category):
        return None
    required = taxonomy.effective_min_tools(category, default_min_tools)
    if count < required:
        return Violation(category, "", f"Live category must have at least {required} tools, found {count}")
    return None


def check_sort_order(category: str, tools: Sequence[Any]) -> Optional[Violation]:
    """Report the first pair of named tools out of ascending name order, if any.

    Records without a string name are passed over; the named records on
    either side of them are still compared.
    """
    previous_name: Optional[str] = None
    for record in tools:
        current_name = _name_of(record)
        if current_name is None:
            continue
        if previous_name is not None and locale_compare(previous_name, current_name) > 0:
            return Violation(
                category,
                "",
                f'Tools must be sorted by name (ASC). Issue between "{previous_name}" and "{current_name}"',
            )
        previous_name = current_name
    return None


def validate_category(
    taxonomy: TaxonomyStore,
    category: str,
    tools: Sequence[Any],
    *,
    default_min_tools: int = DEFAULT_MIN_TOOLS,
    seen_ids: Optional[MutableMapping[str, str]] = None,
) -> List[Violation]:
    """Validate the full tool list of one category.

    ``seen_ids`` maps tool ids to the category that first declared them; pass
    the same mapping for every category to detect ids reused across files.
    """
    violations: List[Violation] = []
    file_ids = set()
    for index, record in enumerate(tools):
        label = tool_label(record, index)
        tool_id = record.get("id") if isinstance(record, Mapping) else None
        if isinstance(tool_id, str):
            if tool_id in file_ids:
                # The first occurrence has already been validated in full.
                violations.append(Violation(category, label, f"Duplicate tool ID: {tool_id}"))
                continue
            file_ids.add(tool_id)
            if seen_ids is not None:
                first_category = seen_ids.get(tool_id)
                if first_category is None:
                    seen_ids[tool_id] = category
                else:
                    violations.append(
                        Violation(
                            category,
                            label,
                            f"Duplicate tool ID across categories: {tool_id} (already declared in '{first_category}')",
                        )
                    )
        violations.extend(validate_tool(taxonomy, category, record, label))

    population = check_population(taxonomy, category, len(tools), default_min_tools=default_min_tools)
    if population is not None:
        violations.append(population)

    ordering = check_sort_order(category, tools)
    if ordering is not None:
        violations.append(ordering)
    return violations


def load_category_file(path: Path) -> Tuple[Optional[List[Any]], Optional[str]]:
    """Read a category file for validation.

    Returns ``(tools, problem)``. A missing file yields ``([], None)``; an
    unreadable or malformed file yields ``(None, message)``.
    """
    if not path.exists():
        return [], None
    try:
        payload = read_json(path)
    except RegistryFileError as exc:
        return None, f"Invalid category file {exc.path}: {exc.reason}"
    if not isinstance(payload, list):
        return None, "tools.json must contain an array of tools"
    return payload, None


def validate_registry(
    taxonomy: TaxonomyStore,
    registry_root: Path,
    *,
    default_min_tools: int = DEFAULT_MIN_TOOLS,
    global_unique_ids: bool = True,
) -> ValidationReport:
    """Validate every category declared in the taxonomy, in registry order."""
    report = ValidationReport()
    seen_ids: Optional[Dict[str, str]] = {} if global_unique_ids else None
    all_tools: List[Any] = []

    for category in taxonomy.category_slugs():
        path = category_tools_path(registry_root, category)
        tools, problem = load_category_file(path)
        report.categories_checked += 1
        if tools is None:
            report.extend([Violation(category, "", problem or "unreadable category file")])
            continue
        if not path.exists():
            logger.debug("No tools file for category %s at %s", category, path)
        report.tools_checked += len(tools)
        report.extend(
            validate_category(
                taxonomy,
                category,
                tools,
                default_min_tools=default_min_tools,
                seen_ids=seen_ids,
            )
        )
        all_tools.extend(tools)

    report.unused_tokens = unused_tokens(taxonomy, all_tools)
    logger.debug(
        "Validated %d categories and %d tools: %d violations",
        report.categories_checked,
        report.tools_checked,
        len(report.violations),
    )
    return report


def unused_tokens(taxonomy: TaxonomyStore, tools: Iterable[Any]) -> Dict[str, List[str]]:
    """List vocabulary tokens that no tool references.

    Vocabularies are append-only; this report is what a reviewer consults
    before retiring a token.
    """
    used_capabilities = set()
    used_models = set()
    used_flags = set()
    for record in tools:
        if not isinstance(record, Mapping):
            continue
        capabilities = record.get("capabilities")
        if isinstance(capabilities, list):
            used_capabilities.update(item for item in capabilities if isinstance(item, str))
        pricing = record.get("pricing")
        if isinstance(pricing, Mapping) and isinstance(pricing.get("model"), str):
            used_models.add(pricing["model"])
        compliance = record.get("compliance")
        if isinstance(compliance, Mapping):
            used_flags.update(key for key in compliance if isinstance(key, str))
    return {
        "capabilities": sorted(taxonomy.capabilities - used_capabilities),
        "pricingModels": sorted(taxonomy.pricing_models - used_models),
        "complianceFlags": sorted(taxonomy.compliance_flags - used_flags),
    }


def _name_of(record: Any) -> Optional[str]:
    if isinstance(record, Mapping):
        name = record.get("name")
        if isinstance(name, str):
            return name
    return None
