"""
Goal progress evaluation and recommendations.

Goals are measured against the current calendar month: total income,
total expense (optionally one category) or profit. Recommendations come
from a fixed rule list evaluated top to bottom.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List

from ..utils.formatting import format_currency
from .records import EXPENSE, INCOME, TransactionRecord, in_accumulation_order, month_start
from .reports import UNCATEGORIZED

GOAL_INCOME = "income"
GOAL_EXPENSE = "expense"
GOAL_PROFIT = "profit"

# Expense goals: lower is better
WITHIN_BUDGET = "within_budget"
APPROACHING_LIMIT = "approaching_limit"
OVER_LIMIT = "over_limit"

# Income and profit goals: higher is better
BEHIND = "behind"
ON_TRACK = "on_track"
ALMOST_THERE = "almost_there"
MET = "met"

# Recommendation thresholds in percent of the target
EXPENSE_WARNING_FROM = 85
EXPENSE_ON_PACE_BELOW = 50
ALMOST_THERE_FROM = {GOAL_INCOME: 75, GOAL_PROFIT: 80}
BEHIND_BELOW = 50

MAX_RECOMMENDATIONS = 6
MIN_RECOMMENDATIONS = 3

MONTH_NAMES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


@dataclass
class MonthlyStats:
    total_income: float = 0.0
    total_expense: float = 0.0
    expenses_by_category: Dict[str, float] = field(default_factory=dict)

    @property
    def total_profit(self) -> float:
        return self.total_income - self.total_expense

    def as_dict(self) -> Dict:
        return {
            "total_income": self.total_income,
            "total_expense": self.total_expense,
            "total_profit": self.total_profit,
            "expenses_by_category": dict(self.expenses_by_category),
        }


@dataclass(frozen=True)
class GoalProgress:
    current: float
    percentage: float
    status: str


def monthly_stats(records: Iterable[TransactionRecord], today: date) -> MonthlyStats:
    """Aggregate the calendar month containing ``today``."""
    current_month = month_start(today)
    stats = MonthlyStats()

    for record in in_accumulation_order(records):
        if month_start(record.date) != current_month:
            continue
        if record.type == INCOME:
            stats.total_income += float(record.amount)
        elif record.type == EXPENSE:
            stats.total_expense += float(record.amount)
            category = record.category or UNCATEGORIZED
            stats.expenses_by_category[category] = (
                stats.expenses_by_category.get(category, 0.0) + float(record.amount)
            )

    return stats


def classify(goal_type: str, percentage: float) -> str:
    """
    Map a percentage to the status vocabulary of the goal type.

    Expense: <=50 within budget, <=85 approaching, above that over limit.
    Income/profit: <50 behind, <75 on track, <100 almost there, 100 met.
    """
    if goal_type == GOAL_EXPENSE:
        if percentage <= 50:
            return WITHIN_BUDGET
        if percentage <= 85:
            return APPROACHING_LIMIT
        return OVER_LIMIT

    if percentage < 50:
        return BEHIND
    if percentage < 75:
        return ON_TRACK
    if percentage < 100:
        return ALMOST_THERE
    return MET


def goal_current(goal, stats: MonthlyStats) -> float:
    if goal.type == GOAL_INCOME:
        return stats.total_income
    if goal.type == GOAL_EXPENSE:
        if goal.category:
            return stats.expenses_by_category.get(goal.category, 0.0)
        return stats.total_expense
    return stats.total_profit


def goal_progress(goal, stats: MonthlyStats) -> GoalProgress:
    """
    Progress of one goal against the month's aggregates.

    ``percentage`` is capped at 100 and is 0 for a zero target.
    """
    current = goal_current(goal, stats)
    target = float(goal.target_amount or 0)
    percentage = min(100.0, current / target * 100) if target > 0 else 0.0
    return GoalProgress(current=current, percentage=percentage, status=classify(goal.type, percentage))


def _recommendation(level, code, message, goal_id=None):
    item = {"level": level, "code": code, "message": message}
    if goal_id is not None:
        item["goal_id"] = goal_id
    return item


def _category_rule(stats: MonthlyStats):
    if stats.total_expense <= 0 or not stats.expenses_by_category:
        return None

    top_category, top_amount = sorted(
        stats.expenses_by_category.items(), key=lambda item: -item[1]
    )[0]
    share = top_amount / stats.total_expense * 100

    if share >= 40:
        return _recommendation(
            "alert",
            "category_concentration",
            f'Atenção: "{top_category}" representa {share:.0f}% ({format_currency(top_amount)}) '
            "de suas despesas este mês. Que tal explorar alternativas para economizar nesta categoria?",
        )
    if share >= 25:
        return _recommendation(
            "tip",
            "top_category",
            f'Dica: a categoria "{top_category}" é sua maior despesa este mês ({share:.0f}%). '
            "Um pequeno corte aqui pode gerar grande impacto.",
        )
    return None


def _profit_rule(stats: MonthlyStats):
    profit = stats.total_profit
    income = stats.total_income

    if income <= 0 and profit == 0:
        return None
    if profit < 0:
        return _recommendation(
            "alert",
            "monthly_loss",
            f"Cuidado: suas despesas estão {format_currency(abs(profit))} acima das receitas este mês. "
            "Reveja seus gastos urgentes.",
        )
    if profit < income * 0.1:
        margin = profit / income * 100 if income else 0.0
        return _recommendation(
            "tip",
            "low_margin",
            f"Melhore seu lucro: seu lucro de {format_currency(profit)} representa apenas "
            f"{margin:.0f}% da sua receita. Tente aumentar receitas ou reduzir despesas.",
        )
    if profit >= income * 0.25:
        return _recommendation(
            "success",
            "healthy_margin",
            f"Excelente lucro! Você teve um lucro de {format_currency(profit)} este mês. "
            "Considere direcionar parte desse valor para investimentos ou sua reserva de emergência.",
        )
    return None


def _goal_rule(goal, progress: GoalProgress, today: date):
    name = goal.description or goal.type
    remaining = float(goal.target_amount or 0) - progress.current
    percent = f"{progress.percentage:.0f}%"

    if goal.type == GOAL_EXPENSE:
        if progress.percentage >= 100:
            return _recommendation(
                "alert",
                "expense_goal_reached",
                f'Meta "{name}" atingida: você gastou {format_currency(progress.current)} de '
                f"{format_currency(goal.target_amount)}. Considere reavaliar seus hábitos nesta área.",
                goal.id,
            )
        if progress.percentage >= EXPENSE_WARNING_FROM:
            return _recommendation(
                "warning",
                "expense_goal_near_limit",
                f'Você já usou {percent} do orçamento da meta "{name}". '
                f"Restam apenas {format_currency(remaining)}.",
                goal.id,
            )
        if progress.percentage < EXPENSE_ON_PACE_BELOW and progress.current > 0:
            return _recommendation(
                "success",
                "expense_goal_on_pace",
                f'Bom ritmo: você utilizou {percent} do orçamento da meta "{name}".',
                goal.id,
            )
        created = getattr(goal, "created_at", None)
        created_this_month = created is None or (
            created.year == today.year and created.month == today.month
        )
        if progress.current == 0 and created_this_month:
            return _recommendation(
                "info",
                "expense_goal_no_data",
                f'Meta "{name}": você ainda não registrou gastos nesta categoria. '
                "Comece a registrar para acompanhar seu progresso.",
                goal.id,
            )
        return None

    kind = "receita" if goal.type == GOAL_INCOME else "lucro"
    if progress.percentage >= 100:
        return _recommendation(
            "success",
            f"{goal.type}_goal_met",
            f'Parabéns! Você atingiu sua meta de {kind} "{name}" com {format_currency(progress.current)}.',
            goal.id,
        )
    if progress.percentage >= ALMOST_THERE_FROM.get(goal.type, ALMOST_THERE_FROM[GOAL_INCOME]):
        return _recommendation(
            "tip",
            f"{goal.type}_goal_almost_there",
            f'Foco final! Você já alcançou {percent} da meta de {kind} "{name}". '
            f"Faltam {format_currency(remaining)}.",
            goal.id,
        )
    if progress.percentage < BEHIND_BELOW:
        return _recommendation(
            "tip",
            f"{goal.type}_goal_behind",
            f'Para a meta "{name}" você atingiu apenas {percent}. '
            "Analise onde pode aumentar receitas ou reduzir despesas.",
            goal.id,
        )
    return None


def recommendations(goals: Iterable, stats: MonthlyStats, today: date) -> List[Dict]:
    """
    Deterministic recommendations for the month.

    Rules run in order: largest expense category share, profit margin,
    then one rule per goal. At most six specific recommendations are
    kept; a generic tip is added when fewer than three were produced.
    """
    produced = []

    for rule in (_category_rule(stats), _profit_rule(stats)):
        if rule is not None:
            produced.append(rule)

    for goal in goals:
        rule = _goal_rule(goal, goal_progress(goal, stats), today)
        if rule is not None:
            produced.append(rule)

    produced = produced[:MAX_RECOMMENDATIONS]

    if len(produced) < MIN_RECOMMENDATIONS:
        produced.append(
            _recommendation(
                "info",
                "generic_tip",
                "Dica rápida: registre todas as suas transações para ter um panorama completo "
                f"das suas finanças neste mês de {MONTH_NAMES[today.month - 1]}.",
            )
        )

    return produced


def evaluate(goals: Iterable, records: Iterable[TransactionRecord], today: date) -> Dict:
    """Monthly stats, per-goal progress and recommendations in one payload."""
    goals = list(goals)
    stats = monthly_stats(records, today)

    progress = []
    for goal in goals:
        result = goal_progress(goal, stats)
        progress.append(
            {
                "goal_id": goal.id,
                "type": goal.type,
                "category": goal.category,
                "description": goal.description,
                "target_amount": float(goal.target_amount),
                "current": result.current,
                "percentage": result.percentage,
                "status": result.status,
            }
        )

    return {
        "stats": stats.as_dict(),
        "goals": progress,
        "recommendations": recommendations(goals, stats, today),
    }
