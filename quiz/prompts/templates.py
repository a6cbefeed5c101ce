"""Quiz Templates - Prompts e bancos de fallback para geracao de quizzes."""

# =============================================================================
# SYSTEM PROMPTS
# =============================================================================

QUIZ_SYSTEM_PROMPT = """You are a quiz writer for Kenyan high school students.
Reply ONLY with the questions in the requested plain-text format, no introduction and no closing remarks."""

INTENT_SYSTEM_PROMPT = """You classify WhatsApp messages sent to a school assistant.
Reply with exactly ONE label and nothing else."""

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

QUIZ_GENERATION_PROMPT = """Create {count} multiple choice questions about {subject} for Kenyan high school students.

RULES:
1. Each question has exactly 4 options labelled A), B), C), D)
2. Exactly one option is correct
3. Keep questions short (they are read on a phone)

FORMAT (follow exactly):
Question 1: [question text]
A) [option]
B) [option]
C) [option]
D) [option]

Question 2: ...

Correct answers: 1-A, 2-C, 3-B"""

INTENT_PROMPT = """Analyze: "{message}"

Reply with ONE of: QUIZ_ANSWER (ONLY if the message is 2-5 letters like "A C B" or "1A 2C 3B"), REGISTER_STUDENT, REGISTER_TEACHER, REGISTER_PARENT, CHECK_PERFORMANCE, QUIZ_REQUEST, RECORD_GRADES, CLASS_STATS, or HELP"""

# =============================================================================
# FALLBACK QUIZZES
# =============================================================================

# (texto, alternativas A-D, letra correta). Materia desconhecida usa Mathematics.
FALLBACK_QUIZZES: dict[str, list[tuple[str, list[str], str]]] = {
    "Mathematics": [
        ("What is 15 × 4?", ["45", "60", "50", "55"], "B"),
        ("Solve 2x + 5 = 15", ["x=10", "x=7.5", "x=5", "x=8"], "C"),
        ("Area of a rectangle 8 cm by 5 cm?", ["13 cm²", "26 cm²", "45 cm²", "40 cm²"], "D"),
        ("What is 25% of 80?", ["20", "25", "16", "40"], "A"),
        ("Next prime number after 7?", ["9", "11", "13", "10"], "B"),
    ],
    "English": [
        ("Choose the noun: 'The dog barked loudly.'", ["barked", "loudly", "dog", "the"], "C"),
        ("Plural of 'child'?", ["childs", "children", "childes", "childrens"], "B"),
        ("Opposite of 'ancient'?", ["modern", "old", "historic", "early"], "A"),
        ("Past tense of 'go'?", ["goed", "gone", "going", "went"], "D"),
        ("Which is a conjunction?", ["quickly", "and", "under", "happy"], "B"),
    ],
    "Science": [
        ("Chemical symbol for water?", ["O2", "CO2", "H2O", "NaCl"], "C"),
        ("Which organ pumps blood?", ["Heart", "Lungs", "Liver", "Kidney"], "A"),
        ("Plants make food through...", ["respiration", "digestion", "transpiration", "photosynthesis"], "D"),
        ("Unit of force?", ["Joule", "Newton", "Watt", "Pascal"], "B"),
        ("Boiling point of water at sea level?", ["90°C", "110°C", "100°C", "80°C"], "C"),
    ],
    "Kiswahili": [
        ("'Kitabu' in English is...", ["pen", "book", "table", "school"], "B"),
        ("Wingi wa 'mtoto' ni...", ["watoto", "mitoto", "vitoto", "matoto"], "A"),
        ("'Asante' means...", ["hello", "sorry", "welcome", "thank you"], "D"),
    ],
}

DEFAULT_FALLBACK_SUBJECT = "Mathematics"
