"""Evaluation rubric: category descriptions, 1-4 level guides and default questionnaire."""

from .scoring import Category

CATEGORY_INFO = {
    Category.COMPLEJIDAD: {
        "nombre": "Complejidad del Problema",
        "descripcion": "Qué tan complejo y significativo es el problema que resuelve",
        "excelencia": (
            "El problema es altamente complejo, afecta a múltiples stakeholders, tiene "
            "consecuencias económicas significativas y no existe una solución efectiva en el "
            "mercado. Hay evidencia concreta de casos reales y datos cuantitativos de impacto."
        ),
    },
    Category.MERCADO: {
        "nombre": "Tamaño y Validación de Mercado",
        "descripcion": "Tamaño del mercado y validación con clientes potenciales",
        "excelencia": (
            "El mercado objetivo está definido con datos cuantitativos (TAM, SAM, SOM), se validó "
            "con más de 100 clientes potenciales y existe evidencia de disposición a pagar."
        ),
    },
    Category.ESCALABILIDAD: {
        "nombre": "Potencial de Escalabilidad",
        "descripcion": "Capacidad de la startup para crecer de manera eficiente",
        "excelencia": (
            "La estrategia de adquisición de clientes es clara y costo-efectiva, los costos "
            "marginales disminuyen con el crecimiento y se probaron estrategias de escala."
        ),
    },
    Category.EQUIPO: {
        "nombre": "Capacidades del Equipo",
        "descripcion": "Experiencia y capacidades del equipo emprendedor",
        "excelencia": (
            "El equipo tiene experiencia relevante en el sector, roles definidos, historial de "
            "trabajo conjunto y habilidades complementarias con compromiso a largo plazo."
        ),
    },
}

RUBRICA = {
    Category.COMPLEJIDAD: {
        1: "No evidencia validación real ni datos de impacto.",
        2: "Conoce el problema pero con validación muy preliminar.",
        3: "Muestra datos cuantitativos iniciales y casos reales.",
        4: "Presenta evidencia sólida y métricas del impacto.",
    },
    Category.MERCADO: {
        1: "No dimensiona el mercado o lo hace sin respaldo.",
        2: "Estimaciones generales sin datos específicos.",
        3: "Análisis de mercado con segmentación y fuentes.",
        4: "Validación completa con TAM, SAM y SOM respaldados.",
    },
    Category.ESCALABILIDAD: {
        1: "No muestra cómo crecerá sin aumentar costos proporcionalmente.",
        2: "Ideas de escalabilidad pero sin plan concreto.",
        3: "Modelo con potencial de escala y primeras validaciones.",
        4: "Modelo probado con economías de escala y efectos de red.",
    },
    Category.EQUIPO: {
        1: "Equipo incompleto o sin experiencia relevante.",
        2: "Equipo con algunas habilidades pero brechas críticas.",
        3: "Equipo complementario con experiencia en el sector.",
        4: "Equipo excepcional con logros previos y red de contactos.",
    },
}

# 4 questions per category, in questionnaire order
DEFAULT_QUESTIONS = [
    (Category.COMPLEJIDAD, "¿Cuál es el problema principal que resuelve su startup?"),
    (Category.COMPLEJIDAD, "¿Qué evidencia tienen de que este problema es real y urgente?"),
    (Category.COMPLEJIDAD, "¿Qué soluciones ya existen en el mercado?"),
    (Category.COMPLEJIDAD, "¿Por qué su solución es única o mejor?"),
    (Category.MERCADO, "¿Cuál es el tamaño de su mercado objetivo?"),
    (Category.MERCADO, "¿Cómo han validado la demanda de su producto?"),
    (Category.MERCADO, "¿Cuántos clientes potenciales han entrevistado?"),
    (Category.MERCADO, "¿Qué porcentaje mostró interés en su solución?"),
    (Category.ESCALABILIDAD, "¿Cómo planean adquirir clientes?"),
    (Category.ESCALABILIDAD, "¿Cuál es su estrategia de crecimiento?"),
    (Category.ESCALABILIDAD, "¿Cómo se reduce el costo de adquisición de clientes?"),
    (Category.ESCALABILIDAD, "¿Qué efectos de red tiene su modelo de negocio?"),
    (Category.EQUIPO, "¿Cuál es la experiencia del equipo en el sector?"),
    (Category.EQUIPO, "¿Cómo se complementan las habilidades del equipo?"),
    (Category.EQUIPO, "¿Qué desafíos han superado juntos?"),
    (Category.EQUIPO, "¿Cuál es su compromiso con el proyecto?"),
]


def default_criteria():
    """Default criterion definitions for a new convocatoria."""
    return [
        {"category": cat, "prompt": prompt, "weight": 1.0, "required": True, "order": i}
        for i, (cat, prompt) in enumerate(DEFAULT_QUESTIONS, start=1)
    ]


def rubric_text(category):
    levels = RUBRICA[Category.parse(category)]
    return "\n".join(f"{lvl}: {levels[lvl]}" for lvl in sorted(levels))
