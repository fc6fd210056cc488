from __future__ import annotations

import copy
from typing import Any

JEAN_DUPONT_PAYLOAD: dict[str, Any] = {
    "updatedCV": {
        "fullName": "Jean Dupont",
        "email": "jean.dupont@email.com",
        "phone": "+33 6 12 34 56 78",
        "location": "Grenoble, France",
        "summary": "Jeune cadre dynamique avec un Master 2 en Management.",
        "experiences": [
            {
                "company": "Flex Cuisine",
                "role": "Adjoint Responsable",
                "location": "Grenoble",
                "period": "12/2021 - Présent",
                "description": ["Gestion opérationnelle de l'équipe de 15 personnes."],
            },
            {
                "company": "Décathlon",
                "role": "Vendeur conseil",
                "period": "2019 - 2021",
                "description": ["Pilotage du rayon montagne.", "Formation des nouveaux arrivants."],
            },
        ],
        "education": [
            {
                "school": "Grenoble École de Management",
                "degree": "Master 2 Management",
                "year": "2023",
            },
        ],
        "skills": ["Management", "Gestion de projet", "Leadership"],
    },
    "insight": {
        "jobTitle": "Business Unit Manager",
        "estimatedSalary": "38 000 - 45 000 € brut/an",
        "reasoning": "Le marché grenoblois valorise les profils Master 2.",
        "sources": [{"title": "Glassdoor Grenoble", "uri": "https://glassdoor.com"}],
    },
}


def jean_dupont_payload() -> dict[str, Any]:
    return copy.deepcopy(JEAN_DUPONT_PAYLOAD)
