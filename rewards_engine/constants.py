"""
Game rules of the recognition program.

Levels are expressed in points: every level step needs two more received
recognitions, at 100 points each.
"""

POINTS_PER_RECOGNITION = 100

BADGE_THRESHOLD = 3

MAX_LEVEL_NAME = "Máximo"

LEVELS = [
    {"level": 0, "name": "Novato", "required_points": 0},
    {"level": 1, "name": "Aprendiz", "required_points": 200},
    {"level": 2, "name": "Participante", "required_points": 400},
    {"level": 3, "name": "Contribuidor", "required_points": 600},
    {"level": 4, "name": "Mentor", "required_points": 800},
    {"level": 5, "name": "Líder", "required_points": 1000},
    {"level": 6, "name": "Leyenda", "required_points": 1200},
]

BADGE_DEFINITIONS = [
    {
        "name": "Maestro de la Innovación",
        "principle": "Innovación",
        "description": "Premiado por ideas creativas que rompen esquemas y mejoran procesos.",
    },
    {
        "name": "Campeón del Cliente",
        "principle": "Foco en el Cliente",
        "description": "Destacado por ir más allá para satisfacer y deleitar a los clientes.",
    },
    {
        "name": "Colaborador Estrella",
        "principle": "Trabajo en Equipo",
        "description": "Celebrado por fomentar un ambiente de cooperación y apoyo mutuo.",
    },
    {
        "name": "Ejecutor Impecable",
        "principle": "Excelencia",
        "description": "Reconocido por entregar resultados de alta calidad de manera consistente.",
    },
    {
        "name": "Pilar de Integridad",
        "principle": "Integridad",
        "description": "Premiado por actuar siempre con honestidad, transparencia y ética.",
    },
]

LEADERBOARD_SIZE = 10
TOP_RECOGNIZED_SIZE = 5

MONTH_LABELS = ["Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"]
