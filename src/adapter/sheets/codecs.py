"""Row Codecs

Bidirectional mapping between domain entities and flat lists of cell
strings. Each entity has one ``RowCodec`` built from a declarative column
table, so the header row and the positional layout come from the same
place and a column change is a one-line diff.

Decoding never raises: blank cells become type defaults, unparsable dates
become "now", unparsable numbers become zero and malformed JSON becomes
None. One bad row must not make a whole table unreadable.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from src.domain.activity_log import ActivityLog
from src.domain.base import BaseModel, utcnow
from src.domain.client import Client
from src.domain.invoice import Invoice, InvoiceStatus, LineItem
from src.domain.payment import Payment, PaymentMethod
from src.domain.project import Project, ProjectStatus
from src.domain.recurring import RecurringSchedule
from src.domain.settings import CompanySettings
from src.domain.task import Task, TaskPriority, TaskStatus
from src.domain.template import Template
from src.domain.time_entry import TimeEntry

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

E = TypeVar("E", bound=BaseModel)

FALLBACK_DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%m/%d/%Y %H:%M:%S", "%Y-%m-%d %H:%M:%S")
TRUE_VALUES = {"true", "1", "yes", "y"}


class CellKind(str, Enum):
    TEXT = "text"
    OPTIONAL_TEXT = "optional_text"
    DECIMAL = "decimal"
    OPTIONAL_DECIMAL = "optional_decimal"
    FLOAT = "float"
    OPTIONAL_FLOAT = "optional_float"
    INT = "int"
    BOOL = "bool"
    DATETIME = "datetime"
    OPTIONAL_DATETIME = "optional_datetime"
    ENUM = "enum"
    JSON_OBJECT = "json_object"
    JSON_LIST = "json_list"


def parse_datetime(raw: str) -> Optional[datetime]:
    """Parse ISO-8601 (and a few common fallbacks); None when unparsable"""
    text = raw.strip()
    if not text:
        return None
    try:
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        value = None
        for fmt in FALLBACK_DATE_FORMATS:
            try:
                value = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def parse_decimal(raw: str) -> Optional[Decimal]:
    text = raw.strip().replace(",", "")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_float(raw: str) -> Optional[float]:
    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if value == value and value not in (float("inf"), float("-inf")) else None


def parse_json(raw: str) -> Any:
    text = raw.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class Column:
    """
    One spreadsheet column

    Attributes:
        header: Header cell text in row 1
        field: Entity attribute; dotted paths address nested models (address.street)
        kind: How the cell is parsed and formatted
        enum: Enum type for ENUM columns (unknown values fall back to ``default``)
        model: Pydantic model for JSON_OBJECT columns (None = plain dict)
        default: Fallback for ENUM columns
    """

    header: str
    field: str
    kind: CellKind = CellKind.TEXT
    enum: Optional[Type[Enum]] = None
    model: Optional[Type[BaseModel]] = None
    default: Any = None

    def parse(self, raw: Any) -> Any:
        text = "" if raw is None else str(raw)
        kind = self.kind

        if kind == CellKind.TEXT:
            return text
        if kind == CellKind.OPTIONAL_TEXT:
            return text if text != "" else None
        if kind == CellKind.DECIMAL:
            value = parse_decimal(text)
            return Decimal("0") if value is None else value
        if kind == CellKind.OPTIONAL_DECIMAL:
            return parse_decimal(text)
        if kind == CellKind.FLOAT:
            value = parse_float(text)
            return 0.0 if value is None else value
        if kind == CellKind.OPTIONAL_FLOAT:
            return parse_float(text)
        if kind == CellKind.INT:
            value = parse_float(text)
            return 0 if value is None else int(value)
        if kind == CellKind.BOOL:
            return text.strip().lower() in TRUE_VALUES
        if kind == CellKind.DATETIME:
            return parse_datetime(text) or utcnow()
        if kind == CellKind.OPTIONAL_DATETIME:
            if not text.strip():
                return None
            return parse_datetime(text) or utcnow()
        if kind == CellKind.ENUM:
            try:
                return self.enum(text.strip())
            except ValueError:
                return self.default
        if kind == CellKind.JSON_LIST:
            value = parse_json(text)
            if not isinstance(value, list):
                return []
            return [str(item) for item in value]
        if kind == CellKind.JSON_OBJECT:
            value = parse_json(text)
            if not isinstance(value, dict):
                return None
            if self.model is None:
                return value
            try:
                return self.model.model_validate(value)
            except PydanticValidationError:
                logger.warning(f"Dropping malformed {self.header} value: {text[:80]}")
                return None
        return text

    def format(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.isoformat()
        if self.kind == CellKind.JSON_LIST:
            return json.dumps(list(value), ensure_ascii=False)
        if self.kind == CellKind.JSON_OBJECT:
            if isinstance(value, BaseModel):
                value = value.model_dump(mode="json")
            return json.dumps(value, ensure_ascii=False, default=str)
        return str(value)


def _set_path(target: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


def _get_path(source: Any, path: str) -> Any:
    for part in path.split("."):
        source = getattr(source, part, None)
        if source is None:
            return None
    return source


class RowCodec(Generic[E]):
    """
    Entity <-> row mapper for one table

    Usage:
        row = CLIENT_CODEC.encode(client)
        client = CLIENT_CODEC.decode(row)
    """

    def __init__(
        self,
        entity_type: Type[E],
        columns: Sequence[Column],
        after_decode: Optional[Callable[[E], E]] = None,
    ):
        self.entity_type = entity_type
        self.columns = tuple(columns)
        self._after_decode = after_decode

    @property
    def headers(self) -> List[str]:
        return [column.header for column in self.columns]

    @property
    def width(self) -> int:
        return len(self.columns)

    def decode(self, cells: Sequence[Any]) -> E:
        values: Dict[str, Any] = {}
        for index, column in enumerate(self.columns):
            raw = cells[index] if index < len(cells) else ""
            _set_path(values, column.field, column.parse(raw))

        try:
            entity = self.entity_type.model_validate(values)
        except PydanticValidationError as e:
            logger.warning(
                f"Row for {self.entity_type.__name__} failed validation, keeping raw values: {e}"
            )
            entity = self.entity_type.model_construct(**values)

        if self._after_decode is not None:
            entity = self._after_decode(entity)
        return entity

    def encode(self, entity: E) -> List[str]:
        return [column.format(_get_path(entity, column.field)) for column in self.columns]


class OwnedLineItem(LineItem):
    """Line item row with the id of the invoice/template that owns it"""

    parent_id: str = ""

    def to_line_item(self) -> LineItem:
        return LineItem(
            id=self.id,
            description=self.description,
            quantity=self.quantity,
            rate=self.rate,
            amount=self.quantity * self.rate,
        )

    @classmethod
    def from_line_item(cls, parent_id: str, item: LineItem) -> "OwnedLineItem":
        return cls(
            id=item.id,
            parent_id=parent_id,
            description=item.description,
            quantity=item.quantity,
            rate=item.rate,
            amount=item.quantity * item.rate,
        )


def _recompute_amount(item: OwnedLineItem) -> OwnedLineItem:
    item.amount = item.quantity * item.rate
    return item


CLIENT_CODEC = RowCodec(Client, [
    Column("ID", "id"),
    Column("Name", "name"),
    Column("Email", "email"),
    Column("Phone", "phone", CellKind.OPTIONAL_TEXT),
    Column("Street", "address.street"),
    Column("City", "address.city"),
    Column("State", "address.state"),
    Column("ZipCode", "address.zip_code"),
    Column("Country", "address.country"),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
    Column("UpdatedAt", "updated_at", CellKind.DATETIME),
])

INVOICE_CODEC = RowCodec(Invoice, [
    Column("ID", "id"),
    Column("InvoiceNumber", "invoice_number"),
    Column("ClientID", "client_id"),
    Column("TemplateID", "template_id", CellKind.OPTIONAL_TEXT),
    Column("Status", "status", CellKind.ENUM, enum=InvoiceStatus, default=InvoiceStatus.DRAFT),
    Column("IssueDate", "issue_date", CellKind.DATETIME),
    Column("DueDate", "due_date", CellKind.DATETIME),
    Column("Subtotal", "subtotal", CellKind.DECIMAL),
    Column("TaxRate", "tax_rate", CellKind.DECIMAL),
    Column("TaxAmount", "tax_amount", CellKind.DECIMAL),
    Column("Total", "total", CellKind.DECIMAL),
    Column("PaidAmount", "paid_amount", CellKind.DECIMAL),
    Column("Balance", "balance", CellKind.DECIMAL),
    Column("Notes", "notes", CellKind.OPTIONAL_TEXT),
    Column("IsRecurring", "is_recurring", CellKind.BOOL),
    Column("RecurringSchedule", "recurring_schedule", CellKind.JSON_OBJECT, model=RecurringSchedule),
    Column("SentDate", "sent_date", CellKind.OPTIONAL_DATETIME),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
    Column("UpdatedAt", "updated_at", CellKind.DATETIME),
])

LINE_ITEM_COLUMNS = [
    Column("ID", "id"),
    Column("InvoiceID", "parent_id"),
    Column("Description", "description"),
    Column("Quantity", "quantity", CellKind.DECIMAL),
    Column("Rate", "rate", CellKind.DECIMAL),
    Column("Amount", "amount", CellKind.DECIMAL),
]

LINE_ITEM_CODEC = RowCodec(OwnedLineItem, LINE_ITEM_COLUMNS, after_decode=_recompute_amount)

TEMPLATE_LINE_ITEM_CODEC = RowCodec(
    OwnedLineItem,
    [Column("TemplateID", "parent_id") if c.field == "parent_id" else c for c in LINE_ITEM_COLUMNS],
    after_decode=_recompute_amount,
)

PAYMENT_CODEC = RowCodec(Payment, [
    Column("ID", "id"),
    Column("InvoiceID", "invoice_id"),
    Column("Amount", "amount", CellKind.DECIMAL),
    Column("PaymentDate", "payment_date", CellKind.DATETIME),
    Column("PaymentMethod", "payment_method", CellKind.ENUM, enum=PaymentMethod, default=PaymentMethod.OTHER),
    Column("Notes", "notes", CellKind.OPTIONAL_TEXT),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
])

TEMPLATE_CODEC = RowCodec(Template, [
    Column("ID", "id"),
    Column("Name", "name"),
    Column("Description", "description", CellKind.OPTIONAL_TEXT),
    Column("TaxRate", "tax_rate", CellKind.DECIMAL),
    Column("Notes", "notes", CellKind.OPTIONAL_TEXT),
    Column("IsActive", "is_active", CellKind.BOOL),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
    Column("UpdatedAt", "updated_at", CellKind.DATETIME),
])

PROJECT_CODEC = RowCodec(Project, [
    Column("ID", "id"),
    Column("Name", "name"),
    Column("Description", "description", CellKind.OPTIONAL_TEXT),
    Column("ClientID", "client_id"),
    Column("Status", "status", CellKind.ENUM, enum=ProjectStatus, default=ProjectStatus.PLANNING),
    Column("StartDate", "start_date", CellKind.DATETIME),
    Column("EndDate", "end_date", CellKind.OPTIONAL_DATETIME),
    Column("Budget", "budget", CellKind.OPTIONAL_DECIMAL),
    Column("HourlyRate", "hourly_rate", CellKind.OPTIONAL_DECIMAL),
    Column("IsActive", "is_active", CellKind.BOOL),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
    Column("UpdatedAt", "updated_at", CellKind.DATETIME),
])

TASK_CODEC = RowCodec(Task, [
    Column("ID", "id"),
    Column("ProjectID", "project_id"),
    Column("Title", "title"),
    Column("Description", "description", CellKind.OPTIONAL_TEXT),
    Column("Status", "status", CellKind.ENUM, enum=TaskStatus, default=TaskStatus.TODO),
    Column("Priority", "priority", CellKind.ENUM, enum=TaskPriority, default=TaskPriority.MEDIUM),
    Column("AssignedTo", "assigned_to", CellKind.OPTIONAL_TEXT),
    Column("DueDate", "due_date", CellKind.OPTIONAL_DATETIME),
    Column("EstimatedHours", "estimated_hours", CellKind.OPTIONAL_FLOAT),
    Column("ActualHours", "actual_hours", CellKind.FLOAT),
    Column("BillableHours", "billable_hours", CellKind.FLOAT),
    Column("IsBillable", "is_billable", CellKind.BOOL),
    Column("Tags", "tags", CellKind.JSON_LIST),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
    Column("UpdatedAt", "updated_at", CellKind.DATETIME),
])

TIME_ENTRY_CODEC = RowCodec(TimeEntry, [
    Column("ID", "id"),
    Column("TaskID", "task_id"),
    Column("ProjectID", "project_id"),
    Column("Description", "description", CellKind.OPTIONAL_TEXT),
    Column("StartTime", "start_time", CellKind.DATETIME),
    Column("EndTime", "end_time", CellKind.OPTIONAL_DATETIME),
    Column("Duration", "duration", CellKind.INT),
    Column("IsBillable", "is_billable", CellKind.BOOL),
    Column("HourlyRate", "hourly_rate", CellKind.OPTIONAL_DECIMAL),
    Column("CreatedAt", "created_at", CellKind.DATETIME),
    Column("UpdatedAt", "updated_at", CellKind.DATETIME),
])

ACTIVITY_LOG_CODEC = RowCodec(ActivityLog, [
    Column("ID", "id"),
    Column("Type", "type"),
    Column("Description", "description"),
    Column("EntityType", "entity_type"),
    Column("EntityID", "entity_id"),
    Column("EntityName", "entity_name"),
    Column("UserID", "user_id", CellKind.OPTIONAL_TEXT),
    Column("UserEmail", "user_email", CellKind.OPTIONAL_TEXT),
    Column("Amount", "amount", CellKind.OPTIONAL_DECIMAL),
    Column("PreviousValue", "previous_value", CellKind.OPTIONAL_TEXT),
    Column("NewValue", "new_value", CellKind.OPTIONAL_TEXT),
    Column("Metadata", "metadata", CellKind.JSON_OBJECT),
    Column("IPAddress", "ip_address", CellKind.OPTIONAL_TEXT),
    Column("UserAgent", "user_agent", CellKind.OPTIONAL_TEXT),
    Column("Timestamp", "timestamp", CellKind.DATETIME),
])


class SettingsCodec:
    """
    CompanySettings <-> Key/Value/UpdatedAt rows

    Unknown keys are ignored and missing keys keep their defaults, so rows
    can be added or removed by hand in the sheet.
    """

    headers = ["Key", "Value", "UpdatedAt"]

    # setting key -> column (header is the key itself)
    keys = {
        "company_name": Column("company_name", "name"),
        "company_email": Column("company_email", "email"),
        "company_phone": Column("company_phone", "phone", CellKind.OPTIONAL_TEXT),
        "company_street": Column("company_street", "address.street"),
        "company_city": Column("company_city", "address.city"),
        "company_state": Column("company_state", "address.state"),
        "company_zip_code": Column("company_zip_code", "address.zip_code"),
        "company_country": Column("company_country", "address.country"),
        "tax_rate": Column("tax_rate", "tax_rate", CellKind.DECIMAL),
        "payment_terms": Column("payment_terms", "payment_terms", CellKind.INT),
        "currency": Column("currency", "currency"),
        "invoice_prefix": Column("invoice_prefix", "invoice_prefix"),
        "date_format": Column("date_format", "date_format"),
        "time_zone": Column("time_zone", "time_zone"),
    }

    def decode(self, rows: Sequence[Sequence[Any]]) -> CompanySettings:
        values: Dict[str, Any] = CompanySettings().model_dump()
        for row in rows:
            if not row:
                continue
            column = self.keys.get(str(row[0]).strip())
            if column is None:
                continue
            raw = row[1] if len(row) > 1 else ""
            if column.kind != CellKind.OPTIONAL_TEXT and not str(raw).strip():
                continue
            _set_path(values, column.field, column.parse(raw))
        try:
            return CompanySettings.model_validate(values)
        except PydanticValidationError as e:
            logger.warning(f"Settings rows failed validation, using defaults: {e}")
            return CompanySettings()

    def encode(self, settings: CompanySettings, updated_at: Optional[datetime] = None) -> List[List[str]]:
        stamp = (updated_at or utcnow()).isoformat()
        return [
            [key, column.format(_get_path(settings, column.field)), stamp]
            for key, column in self.keys.items()
        ]


SETTINGS_CODEC = SettingsCodec()
