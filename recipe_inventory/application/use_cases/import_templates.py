"""Import Templates use case: bulk rows -> one template per recipe name."""

import csv
import io
from dataclasses import dataclass, field

from pydantic import ValidationError as PydanticValidationError

from recipe_inventory.application.dto.requests import ImportTemplatesRequest, TemplateRowRequest
from recipe_inventory.application.dto.responses import (
    ImportOutcomeResponse,
    ImportTemplatesResponse,
)
from recipe_inventory.application.use_cases.create_template import CreateTemplateUseCase
from recipe_inventory.application.use_cases.update_template import UpdateTemplateUseCase
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient
from recipe_inventory.core.exceptions import RecipeInventoryError, ValidationError
from recipe_inventory.core.interfaces.template_store import ITemplateStore
from recipe_inventory.core.services.template_rules import validate_definition

logger = get_logger(__name__)


@dataclass
class ImportOutcome:
    recipe_name: str
    outcome: str  # created | partial | updated | skipped | failed
    template_id: int | None = None
    message: str | None = None


@dataclass
class ImportResult:
    outcomes: list[ImportOutcome] = field(default_factory=list)

    def count(self, outcome: str) -> int:
        return sum(1 for o in self.outcomes if o.outcome == outcome)


CSV_COLUMNS = (
    "recipe_name",
    "category",
    "ingredient_name",
    "quantity",
    "unit",
    "cost_per_unit",
    "ingredient_category",
)
REQUIRED_COLUMNS = ("recipe_name", "ingredient_name", "quantity", "unit")


def parse_template_csv(text: str) -> list[TemplateRowRequest]:
    """
    Parse template rows from CSV text with a header line.

    Header names are matched case-insensitively; blank lines are skipped.

    Raises:
        ValidationError: Missing required columns or an unparseable row
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    header = [h.strip().lower() for h in reader.fieldnames or []]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise ValidationError("header", f"missing columns: {', '.join(missing)}", header)

    rows: list[TemplateRowRequest] = []
    for line_no, raw in enumerate(reader, start=2):
        record = {
            (k or "").strip().lower(): (v or "").strip() for k, v in raw.items() if k
        }
        if not any(record.values()):
            continue
        values = {c: record[c] for c in CSV_COLUMNS if record.get(c)}
        try:
            rows.append(TemplateRowRequest.model_validate(values))
        except PydanticValidationError as e:
            raise ValidationError(
                f"line {line_no}", e.errors()[0]["msg"], raw
            ) from e
    return rows


def group_rows(rows: list[TemplateRowRequest]) -> list[RecipeTemplate]:
    """
    Group flat rows by recipe name into template definitions.

    Names are compared case-insensitively; groups keep first-seen order and
    take the first non-empty category of their rows.
    """
    groups: dict[str, RecipeTemplate] = {}
    for row in rows:
        key = " ".join(row.recipe_name.lower().split())
        template = groups.get(key)
        if template is None:
            template = RecipeTemplate(name=row.recipe_name.strip())
            groups[key] = template
        if not template.category_name and row.category and row.category.strip():
            template.category_name = row.category.strip()
        template.ingredients.append(
            TemplateIngredient(
                position=len(template.ingredients),
                ingredient_name=row.ingredient_name.strip(),
                quantity=row.quantity,
                unit=row.unit.strip(),
                cost_per_unit=row.cost_per_unit,
                ingredient_category=row.ingredient_category,
            )
        )
    return list(groups.values())


class ImportTemplatesUseCase:
    """Create one template per recipe group, reporting an outcome per group."""

    def __init__(
        self,
        template_store: ITemplateStore | None = None,
        create_use_case: CreateTemplateUseCase | None = None,
        update_use_case: UpdateTemplateUseCase | None = None,
    ):
        self._template_store = template_store
        self._create = create_use_case
        self._update = update_use_case

    async def _get_template_store(self) -> ITemplateStore:
        if self._template_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_template_store

            self._template_store = await get_template_store()
        return self._template_store

    async def execute(self, request: ImportTemplatesRequest) -> ImportResult:
        store = await self._get_template_store()
        create = self._create or CreateTemplateUseCase(store)
        update = self._update or UpdateTemplateUseCase(store)

        templates = group_rows(request.rows)
        logger.info("template_import_started", rows=len(request.rows), groups=len(templates))

        result = ImportResult()
        for template in templates:
            outcome = await self._import_one(
                store, create, update, template, request.update_existing
            )
            result.outcomes.append(outcome)

        logger.info(
            "template_import_complete",
            created=result.count("created"),
            updated=result.count("updated"),
            partial=result.count("partial"),
            skipped=result.count("skipped"),
            failed=result.count("failed"),
        )
        return result

    async def _import_one(
        self,
        store: ITemplateStore,
        create: CreateTemplateUseCase,
        update: UpdateTemplateUseCase,
        template: RecipeTemplate,
        update_existing: bool,
    ) -> ImportOutcome:
        problems = validate_definition(template)
        if problems:
            return ImportOutcome(template.name, "failed", message="; ".join(problems))

        try:
            existing = await store.get_template_by_name(template.name)
            if existing is not None:
                if not update_existing:
                    return ImportOutcome(
                        template.name,
                        "skipped",
                        template_id=existing.id,
                        message="active template with this name already exists",
                    )
                updated = await update.replace(existing.id, template)
                return ImportOutcome(
                    template.name,
                    "updated",
                    template_id=updated.id,
                    message=f"version {updated.version}",
                )

            created = await create.create(template)
            return ImportOutcome(
                template.name,
                created.outcome,
                template_id=created.template.id,
                message="; ".join(created.warnings) or None,
            )
        except RecipeInventoryError as e:
            logger.warning("template_import_failed", name=template.name, error=e.message)
            return ImportOutcome(template.name, "failed", message=e.message)

    def to_response(self, result: ImportResult) -> ImportTemplatesResponse:
        return ImportTemplatesResponse(
            total=len(result.outcomes),
            created=result.count("created"),
            updated=result.count("updated"),
            partial=result.count("partial"),
            skipped=result.count("skipped"),
            failed=result.count("failed"),
            results=[
                ImportOutcomeResponse(
                    recipe_name=o.recipe_name,
                    outcome=o.outcome,
                    template_id=o.template_id,
                    message=o.message,
                )
                for o in result.outcomes
            ],
        )
