"""
Default organization catalog.

Written to the store on first start only; the store is the source of truth
afterwards.
"""

from kpiboard.models.app_config import AppConfig, CategoryMeta, DepartmentMeta, StatusMeta
from kpiboard.models.department import (
    Department,
    Departments,
    Kpi,
    ManualGoal,
    Milestone,
    MilestoneGoal,
    QuantitativeGoal,
)
from kpiboard.models.enums import KpiTrend, KpiUnit
from kpiboard.models.weights import WeightConfig, Weights
from kpiboard.services.permissions import DEFAULT_ROLE_GRANTS


_DEPARTMENTS: list[DepartmentMeta] = [
    DepartmentMeta(id="VD", name="Venda Direta", icon="Phone"),
    DepartmentMeta(id="VI", name="Vendas Indiretas", icon="Users"),
    DepartmentMeta(id="ENT", name="Enterprise", icon="Briefcase"),
    DepartmentMeta(id="FIN", name="Financeiro", icon="DollarSign"),
    DepartmentMeta(id="MKT", name="Marketing", icon="TrendingUp"),
    DepartmentMeta(id="OPS", name="Operações e CS", icon="Shield"),
    DepartmentMeta(id="TEC", name="Tecnologia", icon="Server"),
    DepartmentMeta(id="RH", name="Pessoas & Cultura", icon="Heart"),
]

_DEPARTMENT_LABELS: dict[str, str] = {
    "VD": "Vendas Diretas",
    "VI": "Canais & Parceiros",
    "ENT": "Grandes Contas",
    "FIN": "Financeiro & Admin",
    "MKT": "Growth & Branding",
    "OPS": "Ops & Sucesso",
    "TEC": "Engenharia & Produto",
    "RH": "RH & Cultura",
}

_CATEGORIES: list[CategoryMeta] = [
    CategoryMeta(id="Growth & Scale", label="Crescimento", color_theme="orange", icon="Rocket"),
    CategoryMeta(id="Sales Engine", label="Vendas", color_theme="blue", icon="TrendingUp"),
    CategoryMeta(id="Customer Obsession", label="Clientes", color_theme="rose", icon="HeartHandshake"),
    CategoryMeta(id="Data Intelligence", label="Dados", color_theme="cyan", icon="BarChart2"),
    CategoryMeta(id="Automation & Ops", label="Automação", color_theme="violet", icon="Zap"),
    CategoryMeta(id="Tech & Cloud", label="Tecnologia", color_theme="slate", icon="Server"),
    CategoryMeta(id="Finance & Gov", label="Finanças", color_theme="emerald", icon="Coins"),
    CategoryMeta(id="Innovation & AI", label="Inovação", color_theme="fuchsia", icon="Brain"),
    CategoryMeta(id="People & Culture", label="Pessoas", color_theme="lime", icon="Users"),
]

_STATUSES: list[StatusMeta] = [
    StatusMeta(id="Planejado", label="Planejado", color_theme="slate", icon="Circle"),
    StatusMeta(id="Em Desenvolvimento", label="Em Desenv.", color_theme="amber", icon="Clock"),
    StatusMeta(id="Em Progresso", label="Em Progresso", color_theme="blue", icon="TrendingUp"),
    StatusMeta(id="Concluído", label="Concluído", color_theme="emerald", icon="CheckCircle2"),
    StatusMeta(id="Bloqueado", label="Bloqueado", color_theme="red", icon="AlertCircle"),
]

_PLANNED = "Planejado"

_OPS_KPIS: list[Kpi] = [
    Kpi(id="kpi-ops-churn", name="Churn", value=0, target=60000,
        unit=KpiUnit.CURRENCY, trend=KpiTrend.DOWN, icon="AlertTriangle"),
    Kpi(id="kpi-ops-revenue", name="Novas Receitas", value=0, target=18000,
        unit=KpiUnit.CURRENCY, trend=KpiTrend.UP, icon="DollarSign"),
    Kpi(id="kpi-ops-nps", name="NPS", value=0, target=85,
        unit=KpiUnit.NUMBER, trend=KpiTrend.UP, icon="Heart"),
    Kpi(id="kpi-ops-csat", name="CSAT", value=0, target=4.6,
        unit=KpiUnit.RATING, trend=KpiTrend.UP, icon="Star"),
    Kpi(id="kpi-ops-retention", name="Taxa de Retenção", value=0, target=15,
        unit=KpiUnit.PERCENT, trend=KpiTrend.UP, icon="Shield"),
]

_OPS_GOALS = [
    ManualGoal(
        id="goal-ops-1",
        title="Relatórios Insights (IA)",
        category="Innovation & AI",
        status=_PLANNED,
        description="Produzir relatórios gerenciais e estratégicos de forma automatizada, "
        "com apoio de IA, transformando dados operacionais em insights acionáveis.",
    ),
    QuantitativeGoal(
        id="goal-ops-2",
        title="Gamificação - 6 Indicações",
        category="Growth & Scale",
        status=_PLANNED,
        description="Estimular 6 indicações no trimestre de novas empresas por meio de "
        "mecânica de benefícios e descontos em mensalidade.",
        current_value=0,
        target_value=6,
        metric_unit="Indicações",
    ),
    QuantitativeGoal(
        id="goal-ops-3",
        title="Upsell - 24 Contas",
        category="Customer Obsession",
        status=_PLANNED,
        description="Atuação proativa do CSM em pelo menos 24 contas no trimestre, com "
        "foco em identificar oportunidades de expansão.",
        current_value=0,
        target_value=24,
        metric_unit="Contas",
    ),
    ManualGoal(
        id="goal-ops-4",
        title="Win Back",
        category="Sales Engine",
        status=_PLANNED,
        description="Reconquistar clientes que estão fora da base há 180 dias, "
        "restabelecendo a relação e retomando a parceria.",
    ),
    QuantitativeGoal(
        id="goal-ops-5",
        title="Crossell - 2 Projetos",
        category="Sales Engine",
        status=_PLANNED,
        description="Fechar no mínimo 2 projetos de consumo de dados com clientes Key "
        "Accounts ao longo do Q1.",
        current_value=0,
        target_value=2,
        metric_unit="Projetos",
    ),
    MilestoneGoal(
        id="goal-ops-6",
        title="Processo de Retenção com IA",
        category="Innovation & AI",
        status=_PLANNED,
        description="Desenhar o processo usando a IA.",
        milestones=[
            Milestone(id="m1", label="Mapeamento do processo atual", weight=30),
            Milestone(id="m2", label="Desenho do fluxo com IA", weight=40),
            Milestone(id="m3", label="Implementação e Teste", weight=30),
        ],
    ),
    ManualGoal(
        id="goal-ops-7",
        title="Postagens Automáticas",
        category="Automation & Ops",
        status=_PLANNED,
        description="Automatizar a criação e publicação de conteúdos, garantindo "
        "consistência dos locais, frequência e ganho de escala operacional.",
    ),
    ManualGoal(
        id="goal-ops-8",
        title="Health Score",
        category="Data Intelligence",
        status=_PLANNED,
        description="Será criado dentro do monday.com para monitoramento de saúde da carteira.",
    ),
]


def initial_config() -> AppConfig:
    """Default organizational configuration (fresh copy)."""
    return AppConfig(
        departments=[dept.model_copy() for dept in _DEPARTMENTS],
        categories={category.id: category.model_copy() for category in _CATEGORIES},
        statuses={status.id: status.model_copy() for status in _STATUSES},
        role_permissions=dict(DEFAULT_ROLE_GRANTS),
    )


def initial_data() -> Departments:
    """Default departments; only OPS ships with KPIs and goals (fresh copy)."""
    data: Departments = {}
    for meta in _DEPARTMENTS:
        department = Department(id=meta.id, name=meta.name, label=_DEPARTMENT_LABELS[meta.id])
        if meta.id == "OPS":
            department = department.model_copy(
                update={
                    "kpis": [kpi.model_copy() for kpi in _OPS_KPIS],
                    "goals": [goal.model_copy(deep=True) for goal in _OPS_GOALS],
                }
            )
        data[meta.id] = department
    return data


def default_weights() -> Weights:
    """50/50 weighting with no per-item overrides for every default department."""
    return {meta.id: WeightConfig() for meta in _DEPARTMENTS}
