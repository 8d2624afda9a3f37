"""
Domain models for InkValue Studio — pydantic v2.

Covers:
  - Enumerations (tattoo style, complexity, discount kind, proposal status)
  - CostProfile / StudioProfile singletons
  - Project (the live editing draft) and SavedProject (frozen financial record)
  - PricingBreakdown, Report and generative-text result values

All monetary values are floats in the studio's local currency (BRL).
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── ENUMERATIONS ─────────────────────────────────────────────────────────────

class TattooStyle(str, Enum):
    FINE_LINE = "Fine Line"
    OLD_SCHOOL = "Old School"
    REALISM = "Realismo"
    BLACKWORK = "Blackwork"
    WATERCOLOR = "Aquarela"
    TRIBAL = "Tribal"
    LETTERING = "Lettering"
    OTHER = "Outro"


class ComplexityLevel(str, Enum):
    """Ordered low → extreme."""
    LOW = "Baixa"
    MEDIUM = "Média"
    HIGH = "Alta"
    EXTREME = "Extrema"


class DiscountType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class ProposalStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"


BODY_PARTS: List[str] = [
    "Antebraço",
    "Braço (Bíceps/Tríceps)",
    "Ombro",
    "Mão",
    "Peito",
    "Costas (Alta)",
    "Costas (Completa)",
    "Costela",
    "Abdômen",
    "Coxa",
    "Panturrilha",
    "Canela",
    "Pé",
    "Pescoço",
    "Rosto",
    "Outro",
]

# 500 KB cap on an inline logo (data URL) kept in the key-value store
MAX_LOGO_BYTES = 500 * 1024


# ── STUDIO SETTINGS ──────────────────────────────────────────────────────────

class CostProfile(BaseModel):
    """Fixed monthly studio expenses and available working time."""
    monthly_rent: float = Field(1500.0, ge=0)
    monthly_utilities: float = Field(300.0, ge=0)   # electricity, internet, etc.
    monthly_marketing: float = Field(200.0, ge=0)
    monthly_misc: float = Field(100.0, ge=0)
    days_worked_per_month: float = Field(22.0, ge=0)
    hours_worked_per_day: float = Field(6.0, ge=0)

    @property
    def total_monthly_hours(self) -> float:
        return self.days_worked_per_month * self.hours_worked_per_day

    @property
    def total_monthly_fixed_expenses(self) -> float:
        return (
            self.monthly_rent
            + self.monthly_utilities
            + self.monthly_marketing
            + self.monthly_misc
        )


class StudioProfile(BaseModel):
    name: str = "Seu Studio"
    owner_name: str = "Seu Nome"
    document: str = "000.000.000-00"    # CPF or CNPJ
    address: str = "Rua da Tatuagem, 123"
    phone: str = "(00) 00000-0000"
    email: str = "contato@seustudio.com"
    logo_url: str = ""

    @field_validator("logo_url")
    @classmethod
    def _logo_size(cls, v: str) -> str:
        if v and len(v.encode("utf-8")) > MAX_LOGO_BYTES:
            raise ValueError("logo must be smaller than 500KB")
        return v


# ── CLIENTS ──────────────────────────────────────────────────────────────────

class Client(BaseModel):
    id: str
    name: str
    phone: str
    email: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


# ── PROJECTS ─────────────────────────────────────────────────────────────────

class Project(BaseModel):
    """The in-progress tattoo project being priced. Defaults mirror a fresh form."""
    style: TattooStyle = TattooStyle.BLACKWORK
    complexity: ComplexityLevel = ComplexityLevel.MEDIUM
    width_cm: float = Field(10.0, ge=0)
    height_cm: float = Field(10.0, ge=0)
    body_part: str = "Antebraço"
    sessions: int = Field(1, ge=0)
    design_time_hours: float = Field(1.0, ge=0)
    tattoo_time_hours: float = Field(3.0, ge=0)
    material_cost: float = Field(50.0, ge=0)     # needles, ink, gloves, paper
    hourly_rate: float = Field(100.0, ge=0)      # artist's desired labor wage
    profit_margin_percent: float = 30.0
    discount_amount: float = Field(0.0, ge=0)
    discount_type: DiscountType = DiscountType.FIXED


PROJECT_FIELDS = tuple(Project.model_fields)


class SavedProject(Project):
    """
    A persisted proposal. Frozen: the only permitted change is a status
    transition, applied by replacing the record with a copy.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    client_id: str
    client_name: str
    client_phone: Optional[str] = None
    created_at: datetime
    status: ProposalStatus = ProposalStatus.DRAFT
    final_price: float
    final_cost: float
    final_profit: float

    def to_project(self) -> Project:
        return Project(**{name: getattr(self, name) for name in PROJECT_FIELDS})


# ── PRICING ──────────────────────────────────────────────────────────────────

class BreakdownCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    value: float
    color: str


class PricingBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    overhead_per_hour: float
    total_overhead_cost: float
    labor_cost: float
    total_base_cost: float
    gross_price: float             # before discount
    discount_value: float
    suggested_price: float         # after discount, floored at 0
    profit_amount: float           # suggested - base, may be negative
    breakdown: List[BreakdownCategory]


# ── REPORTING ────────────────────────────────────────────────────────────────

class MonthlyBucket(BaseModel):
    month: int                     # 1..12
    name: str
    revenue: float = 0.0
    profit: float = 0.0
    cost: float = 0.0


class Report(BaseModel):
    year: int
    count: int
    total_revenue: float
    total_cost: float
    total_profit: float
    average_ticket: float
    margin_percent: float
    monthly: List[MonthlyBucket]


# ── GENERATIVE TEXT ──────────────────────────────────────────────────────────

class AIAnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analysis: str
    tips: List[str] = []
    is_sustainable: bool = Field(True, alias="isSustainable")
    fallback: bool = False
