import re

UNKNOWN = "unknown"

SECTION_LABELS = ("CUISINE", "DIET", "COOKING TIME", "NUTRITION", "INGREDIENTS", "INSTRUCTIONS")

FIELD_HEADER_RE = re.compile(rf"^(?:{'|'.join(SECTION_LABELS)}):", re.I)
# case-sensitive: only all-caps labels end a list section
SECTION_BREAK_RE = re.compile(r"^[A-Z]+:")

CUISINE_RE = re.compile(r"^CUISINE:", re.I)
DIET_RE = re.compile(r"^DIET:", re.I)
COOKING_TIME_RE = re.compile(r"^COOKING TIME:", re.I)
NUTRITION_RE = re.compile(r"^NUTRITION:", re.I)

NUTRITION_PATTERNS = {
    "calories": re.compile(r"(\d+)\s*(?:calories|kcal|cal)", re.I),
    "protein": re.compile(r"(\d+)g\s*protein", re.I),
    "fat": re.compile(r"(\d+)g\s*fat", re.I),
    "carbohydrates": re.compile(r"(\d+)g\s*carbohydrates?", re.I),
}

FIRST_INTEGER_RE = re.compile(r"(\d+)")
HOURS_RE = re.compile(r"(\d+(?:\.\d+)?(?:\s+\d+/\d+)?|\d+/\d+)\s*(?:hours?|hrs?)\b", re.I)
MINUTES_RE = re.compile(r"(\d+)\s*(?:minutes?|mins?)\b", re.I)

STEP_WORDS = ("one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten")
STEP_PREFIX_RE = re.compile(rf"^step\s+(?:\d+|{'|'.join(STEP_WORDS)})[:.;\s-]*", re.I)
NUMBERED_PREFIX_RE = re.compile(r"^\d+\.\s*")
BULLET_PREFIX_RE = re.compile(r"^[-*]\s*")
NOTE_LINE_RE = re.compile(r"^(?:notes?|tips?)$", re.I)
BARE_NUMBER_RE = re.compile(r"^[0-9]+$")

HTML_TAG_RE = re.compile(r"<[^>]*>")
SENTENCE_BREAK_RE = re.compile(r"\.\s+")

VALID_DIET_TYPES = (
    "vegetarian", "vegan", "gluten-free", "dairy-free", "keto",
    "paleo", "omnivore", "pescatarian", "none",
)

MEAT_KEYWORDS = (
    "chicken", "beef", "pork", "lamb", "fish", "shrimp", "bacon", "ham", "turkey", "duck",
    "anchovy", "anchovies", "salmon", "tuna", "crab", "lobster", "clam", "mussel", "octopus",
    "squid", "veal", "goat", "mutton", "sausage", "prosciutto", "trout", "snapper", "sardine",
    "steak", "mince", "meat", "ox", "rabbit", "venison", "quail", "goose", "pheasant", "snail",
    "escargot", "frog", "eel", "caviar", "roe", "shellfish", "scallop", "calamari", "conch",
    "grouper", "herring", "perch", "pollock", "tilapia", "walleye", "catfish", "carp", "bass",
    "cod", "haddock", "halibut", "mackerel", "mahi", "marlin", "monkfish", "orange roughy",
    "pike", "sablefish", "shad", "skate", "smelt", "sole", "sturgeon", "swordfish",
    "whitefish", "whiting",
)

SYSTEM_USER_ID = "00000000-0000-0000-0000-000000000000"
PLACEHOLDER_IMAGE_URL = "/placeholder-recipe.jpg"
