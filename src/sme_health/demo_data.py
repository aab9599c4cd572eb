"""
Demo Data for SME Health Assessment

Canned answer profiles for demonstrations and testing. Each profile is a
complete answer set for a typical Ghanaian SME; scoring them gives one
healthy business and two businesses caught in compound risk patterns.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .assessment.assessment_engine import AssessmentEngine

# Answers may use option text or option tags; profiles mix both on purpose
DEMO_PROFILES: Dict[str, Dict[str, Any]] = {
    "healthy": {
        "name": "Kente Threads Export Ltd",
        "user_id": "demo-healthy",
        "onboarding": {
            "business_type": "Manufacturing/Production",
            "years_in_business": "5-10 years",
            "monthly_revenue": "GHS 100,000 - 500,000",
            "location": "Ashanti Region"
        },
        "answers": {
            "cash_runway_days": "90+ days - Strong cash reserves",
            "receivables_aging": 30,
            "customer_concentration_risk": 30,
            "profit_margin_reality": "Above 25% - Excellent profitability",
            "mobile_money_integration": 100,
            "forex_exposure_risk": 40,
            "government_contract_readiness": "fully_qualified",
            "local_content_compliance": "fully_compliant",
            "ecowas_afcfta_readiness": "actively_trading",
            "power_stability_management": "multiple_backups",
            "cocoa_commodity_exposure": "not_exposed",
            "gra_tax_compliance": "Fully compliant and up-to-date",
            "key_person_dependency": "Business would continue operating normally",
            "supplier_dependency": 70,
            "competitive_differentiation": "Unique product/service with strong brand",
            "financial_records_quality": "Professional accounting system with monthly reports",
            "digital_payment_adoption": 100,
            "emergency_fund": "Yes, 6+ months of expenses"
        }
    },
    "cash_crisis": {
        "name": "Makola Provisions Store",
        "user_id": "demo-cash-crisis",
        "onboarding": {
            "business_type": "Retail/Trading",
            "years_in_business": "1-3 years",
            "monthly_revenue": "GHS 5,000 - 20,000",
            "location": "Greater Accra"
        },
        "answers": {
            "cash_runway_days": "Less than 15 days - Critical danger",
            "receivables_aging": 45,
            "customer_concentration_risk": 35,
            "profit_margin_reality": "5-10% - Dangerously thin margins",
            "mobile_money_integration": 60,
            "forex_exposure_risk": 20,
            "government_contract_readiness": "not_pursuing",
            "local_content_compliance": "minor_gaps",
            "ecowas_afcfta_readiness": "unaware",
            "power_stability_management": "basic_backup",
            "cocoa_commodity_exposure": "not_exposed",
            "gra_tax_compliance": "Several months behind on payments",
            "key_person_dependency": "Business would likely collapse",
            "supplier_dependency": 50,
            "competitive_differentiation": "Better quality or service than competitors",
            "financial_records_quality": "Simple records, updated irregularly",
            "digital_payment_adoption": 40,
            "inventory_management": "Occasional counts, rough estimates",
            "emergency_fund": "No emergency fund"
        }
    },
    "concentration_trap": {
        "name": "Tema Packaging Supplies",
        "user_id": "demo-concentration",
        "onboarding": {
            "business_type": "Manufacturing/Production",
            "years_in_business": "3-5 years",
            "monthly_revenue": "GHS 50,000 - 100,000",
            "location": "Greater Accra"
        },
        "answers": {
            "cash_runway_days": "30-59 days - Concerning level",
            "receivables_aging": 25,
            "customer_concentration_risk": 75,
            "profit_margin_reality": "margin_5_10",
            "mobile_money_integration": 50,
            "forex_exposure_risk": 30,
            "government_contract_readiness": "partially_qualified",
            "local_content_compliance": "fully_compliant",
            "ecowas_afcfta_readiness": "exploring",
            "power_stability_management": "single_backup",
            "cocoa_commodity_exposure": "indirect",
            "gra_tax_compliance": "minor_delays",
            "key_person_dependency": "some_disruption",
            "supplier_dependency": 60,
            "competitive_differentiation": "price_only",
            "financial_records_quality": "basic_system",
            "digital_payment_adoption": 55,
            "emergency_fund": "months_1_3"
        }
    }
}


def get_demo_answers(profile: str, include_onboarding: bool = True) -> Dict[str, Any]:
    """
    Answer set for a demo profile.

    Raises:
        KeyError: for an unknown profile name
    """
    data = DEMO_PROFILES[profile]
    answers = dict(data["onboarding"]) if include_onboarding else {}
    answers.update(data["answers"])
    return answers


def load_demo_assessments(
    db_session,
    engine: Optional[AssessmentEngine] = None,
    now: Optional[datetime] = None
) -> List[str]:
    """
    Score every demo profile and store the results.

    Args:
        db_session: SQLAlchemy database session
        engine: Engine to score with (default catalog if omitted)
        now: Timestamp of the newest demo result

    Returns:
        List of created record IDs
    """
    from .database.models import AssessmentRecord

    engine = engine or AssessmentEngine()
    now = now or datetime.utcnow()
    record_ids = []

    for offset, (key, profile) in enumerate(DEMO_PROFILES.items()):
        answers = get_demo_answers(key)
        created_at = now - timedelta(days=offset)
        result = engine.calculate_score(answers, created_at=created_at)

        record = AssessmentRecord(
            user_id=profile["user_id"],
            overall_score=result.overall_score,
            risk_level=result.risk_level.value,
            funding_tier=result.funding_readiness.tier,
            result=result.to_dict(),
            answers=answers,
            created_at=created_at
        )
        db_session.add(record)
        db_session.flush()
        record_ids.append(record.id)

    db_session.commit()
    return record_ids
