"""
Compound risk and positive factor rule tables

Each rule pairs a predicate over an AnswerSheet with the metadata the
analyzer and the predictive model need. Predicates read option tags and
parsed numbers only. Rules are listed in catalog order; that order is
kept for equal probabilities after sorting.
"""

from dataclasses import dataclass
from typing import Callable, Tuple

from .answers import AnswerSheet
from .models import CompoundRisk, RiskSeverity

Predicate = Callable[[AnswerSheet], bool]


# Tag groups shared by several predicates
LOW_CASH_RUNWAY = frozenset({"days_15_29", "days_under_15"})
GOOD_CASH_RUNWAY = frozenset({"days_90_plus", "days_60_89"})
LOW_MARGINS = frozenset({"margin_5_10", "margin_below_5"})
GOOD_MARGINS = frozenset({"margin_above_25", "margin_15_25"})
PRICE_COMPETITION = frozenset({"lower_prices", "price_only"})
DIFFERENTIATED = frozenset({"unique_brand", "better_quality"})
OWNER_CRITICAL = frozenset({"likely_collapse", "significant_problems"})
TAX_ARREARS = frozenset({"months_behind", "behind_or_unregistered"})
HEALTHY_EMERGENCY_FUND = frozenset({"months_6_plus", "months_3_6"})
GOOD_RECORDS = frozenset({"professional", "basic_system"})


# =============================================================================
# Risk predicates
# =============================================================================

def is_cash_flow_crisis(sheet: AnswerSheet) -> bool:
    receivables = sheet.number("receivables_aging", default=0)
    high_receivables = receivables is not None and receivables > 30
    return sheet.tag_in("cash_runway_days", LOW_CASH_RUNWAY) and (
        high_receivables or sheet.tag_in("profit_margin_reality", LOW_MARGINS)
    )


def is_customer_concentration_trap(sheet: AnswerSheet) -> bool:
    concentration = sheet.number("customer_concentration_risk", default=0)
    high_concentration = concentration is not None and concentration > 60
    return high_concentration and sheet.tag_in("competitive_differentiation", PRICE_COMPETITION)


def is_owner_dependency_crisis(sheet: AnswerSheet) -> bool:
    return sheet.tag_in("key_person_dependency", OWNER_CRITICAL)


def is_compliance_shutdown_risk(sheet: AnswerSheet) -> bool:
    return sheet.tag_in("gra_tax_compliance", TAX_ARREARS)


def is_profitability_death_spiral(sheet: AnswerSheet) -> bool:
    return (sheet.tag_in("profit_margin_reality", LOW_MARGINS)
            and sheet.tag_in("competitive_differentiation", PRICE_COMPETITION))


# =============================================================================
# Positive factor predicates
# =============================================================================

def has_strong_financials(sheet: AnswerSheet) -> bool:
    return (sheet.tag_in("cash_runway_days", GOOD_CASH_RUNWAY)
            and sheet.tag_in("profit_margin_reality", GOOD_MARGINS)
            and sheet.tag_in("emergency_fund", HEALTHY_EMERGENCY_FUND))


def has_good_governance(sheet: AnswerSheet) -> bool:
    return (sheet.tag_in("financial_records_quality", GOOD_RECORDS)
            and sheet.tag("gra_tax_compliance") == "fully_compliant")


def has_diversified_revenue(sheet: AnswerSheet) -> bool:
    concentration = sheet.number("customer_concentration_risk", default=100)
    return concentration is not None and concentration < 40


def has_competitive_advantage(sheet: AnswerSheet) -> bool:
    return sheet.tag_in("competitive_differentiation", DIFFERENTIATED)


def has_digital_payment_adoption(sheet: AnswerSheet) -> bool:
    adoption = sheet.number("digital_payment_adoption", default=0)
    return adoption is not None and adoption > 50


# =============================================================================
# Rule tables
# =============================================================================

@dataclass(frozen=True)
class CompoundRiskRule:
    """A named multi-factor danger pattern."""
    id: str
    name: str
    severity: RiskSeverity
    probability: float
    category: str
    factors: Tuple[str, ...]
    impact: str
    mitigation: Tuple[str, ...]
    failure_increment: float
    predicate: Predicate

    def matches(self, sheet: AnswerSheet) -> bool:
        return bool(self.predicate(sheet))

    def to_risk(self) -> CompoundRisk:
        return CompoundRisk(
            id=self.id,
            name=self.name,
            severity=self.severity,
            factors=list(self.factors),
            probability=self.probability,
            impact=self.impact,
            mitigation=list(self.mitigation),
            category=self.category
        )


@dataclass(frozen=True)
class PositiveFactorRule:
    """A strength that lifts the risk-adjusted score and/or aids survival."""
    id: str
    bonus: int
    survival_factor: str
    predicate: Predicate

    def matches(self, sheet: AnswerSheet) -> bool:
        return bool(self.predicate(sheet))


COMPOUND_RISK_RULES: Tuple[CompoundRiskRule, ...] = (
    CompoundRiskRule(
        id="cash_flow_crisis",
        name="Imminent Cash Flow Collapse",
        severity=RiskSeverity.CRITICAL,
        probability=0.95,
        category="financial_health",
        factors=(
            "Less than 30 days cash runway",
            "High receivables aging",
            "Thin profit margins"
        ),
        impact="Business failure within 60-90 days without immediate action",
        mitigation=(
            "Emergency cash flow management plan",
            "Aggressive collections on outstanding receivables",
            "Immediate cost reduction measures",
            "Emergency funding search (family, friends, emergency loans)"
        ),
        failure_increment=0.40,
        predicate=is_cash_flow_crisis
    ),
    CompoundRiskRule(
        id="customer_concentration_trap",
        name="Customer Concentration Death Spiral",
        severity=RiskSeverity.CRITICAL,
        probability=0.85,
        category="market_position",
        factors=(
            "Over 60% revenue from top 3 customers",
            "No competitive differentiation",
            "Weak cash position"
        ),
        impact="Loss of major customer could immediately destroy business",
        mitigation=(
            "Emergency customer diversification plan",
            "Strengthen relationships with existing major customers",
            "Develop unique value propositions",
            "Build emergency customer pipeline"
        ),
        failure_increment=0.30,
        predicate=is_customer_concentration_trap
    ),
    CompoundRiskRule(
        id="owner_dependency_crisis",
        name="Critical Owner Dependency",
        severity=RiskSeverity.HIGH,
        probability=0.75,
        category="operational_resilience",
        factors=(
            "Business collapses without owner",
            "No documented processes",
            "Single point of failure"
        ),
        impact="Owner illness or absence could immediately halt operations",
        mitigation=(
            "Document all critical processes immediately",
            "Train key team members",
            "Create succession plan",
            "Implement systems and procedures"
        ),
        failure_increment=0.20,
        predicate=is_owner_dependency_crisis
    ),
    CompoundRiskRule(
        id="compliance_shutdown",
        name="Regulatory Shutdown Risk",
        severity=RiskSeverity.CRITICAL,
        probability=0.80,
        category="compliance_risk",
        factors=(
            "Non-compliant with GRA",
            "Missing business registrations",
            "Tax payment delays"
        ),
        impact="Government agencies could shut down business without warning",
        mitigation=(
            "Immediate compliance audit",
            "Engage tax advisor/accountant",
            "Set up payment plans with authorities",
            "Complete all outstanding registrations"
        ),
        failure_increment=0.35,
        predicate=is_compliance_shutdown_risk
    ),
    CompoundRiskRule(
        id="profitability_death_spiral",
        name="Unsustainable Business Model",
        severity=RiskSeverity.HIGH,
        probability=0.70,
        category="financial_health",
        factors=(
            "Margins below 5%",
            "No pricing power",
            "Rising costs"
        ),
        impact="Business cannot survive economic shocks or invest in growth",
        mitigation=(
            "Immediate cost analysis and reduction",
            "Price optimization strategy",
            "Value-added service development",
            "Operational efficiency improvements"
        ),
        failure_increment=0.25,
        predicate=is_profitability_death_spiral
    ),
)


POSITIVE_FACTOR_RULES: Tuple[PositiveFactorRule, ...] = (
    PositiveFactorRule(
        id="strong_financials",
        bonus=10,
        survival_factor="Strong financial foundation provides resilience",
        predicate=has_strong_financials
    ),
    PositiveFactorRule(
        id="good_governance",
        bonus=8,
        survival_factor="Good governance and compliance reduce regulatory risks",
        predicate=has_good_governance
    ),
    PositiveFactorRule(
        id="diversified_revenue",
        bonus=12,
        survival_factor="Diversified customer base provides stability",
        predicate=has_diversified_revenue
    ),
    PositiveFactorRule(
        id="competitive_advantage",
        bonus=15,
        survival_factor="Clear competitive advantage protects market position",
        predicate=has_competitive_advantage
    ),
    PositiveFactorRule(
        id="digital_payment_adoption",
        bonus=0,
        survival_factor="Digital payment adoption improves cash flow and reduces risks",
        predicate=has_digital_payment_adoption
    ),
)


def get_rule(rule_id: str, rules: Tuple[CompoundRiskRule, ...] = COMPOUND_RISK_RULES) -> CompoundRiskRule:
    """Look up a compound risk rule by id; raises KeyError if unknown."""
    for rule in rules:
        if rule.id == rule_id:
            return rule
    raise KeyError(rule_id)
