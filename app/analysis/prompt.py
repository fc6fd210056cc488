from __future__ import annotations

# Engine instructions stay in French: they target the Grenoble job market and
# changing the language changes the engine's output.
CV_ANALYSIS_PROMPT = """
Tu es un expert en recrutement de haut niveau spécialisé dans le marché de l'emploi à Grenoble (Silicon Valley française).

IMPORTANT : L'utilisateur vient d'obtenir son Master 2. Il n'est plus étudiant. C'est un jeune cadre.

INSTRUCTIONS POUR LE CV :
1. Analyse le texte du CV fourni.
2. Supprime impérativement toute expérience liée à "Comfort Hotel Meylan".
3. Assure-toi que l'expérience chez "Flex" (ou "Flex Cuisine") est marquée comme le poste actuel (jusqu'à aujourd'hui).
4. RÉÉCRITURE DES MISSIONS : Transforme chaque point de description en une réalisation orientée "résultats" et "leadership".
   - Utilise des verbes d'action puissants.
   - Puisque l'utilisateur est maintenant titulaire d'un Master 2, valorise la dimension stratégique, l'autonomie et la capacité à gérer des projets complexes.
5. Intègre ces compétences additionnelles : {{additionalSkills}}.
6. Traduis le tout dans un format JSON structuré.

ANALYSE DE MARCHÉ (GRENOBLE) :
1. Identifie le métier le plus rémunérateur accessible pour un TITULAIRE de Master 2 Management/Commerce à Grenoble (ne propose plus de stages ou d'alternance).
2. Considère les leaders locaux (Schneider Electric, STMicroelectronics, Caterpillar, Rossignol, ou Business Units Tech).
3. Donne une fourchette de salaire de "Jeune Cadre" réaliste pour l'Isère.

CV Input :
{{cvText}}
"""

NO_ADDITIONAL_SKILLS = "Aucune"


def build_prompt(cv_text: str, additional_skills: str = "") -> str:
    skills = additional_skills or NO_ADDITIONAL_SKILLS
    # One replacement each: placeholder text inside the user's input is kept literally.
    return CV_ANALYSIS_PROMPT.replace("{{cvText}}", cv_text, 1).replace("{{additionalSkills}}", skills, 1)
