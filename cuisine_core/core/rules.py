from typing import Dict, List, Set, Any

# --- Conflict Pattern Database ---
# One record per dietary-restriction family. A user restriction string selects
# the first record whose family contains a synonym that is a substring of it.
CONFLICT_PATTERN_TABLE: List[Dict[str, Any]] = [
    {
        "dietary_family": ["vegetarian", "veggie"],
        "conflicts_with": ["beef", "pork", "chicken", "lamb", "fish", "seafood", "meat", "bacon", "ham", "sausage"],
        "substitutions": {
            "beef": ["tofu", "tempeh", "mushrooms", "seitan", "plant-based meat"],
            "chicken": ["tofu", "cauliflower", "chickpeas", "mushrooms"],
            "pork": ["jackfruit", "mushrooms", "tempeh"],
            "lamb": ["eggplant", "lentils", "mushrooms"],
            "fish": ["tofu", "hearts of palm", "banana blossom"],
            "seafood": ["king oyster mushrooms", "hearts of palm", "konjac"],
            "meat": ["mushrooms", "lentils", "plant-based meat"],
            "bacon": ["tempeh bacon", "coconut bacon", "shiitake bacon"],
            "ham": ["smoked tofu", "seitan ham"],
            "ground meat": ["lentils", "mushrooms", "crumbled tofu"],
            "sausage": ["plant-based sausage", "seasoned mushrooms"]
        },
        "cooking_method_alternatives": {
            "bbq meat": ["grilled vegetables", "bbq tofu", "grilled portobello"],
            "stir-fry meat": ["stir-fry tofu", "stir-fry tempeh", "vegetable stir-fry"]
        }
    },
    {
        "dietary_family": ["vegan"],
        "conflicts_with": ["beef", "pork", "chicken", "fish", "dairy", "milk", "cheese", "butter", "eggs", "honey"],
        "substitutions": {
            "beef": ["tofu", "tempeh", "mushrooms", "lentils"],
            "pork": ["jackfruit", "mushrooms", "tempeh"],
            "chicken": ["tofu", "cauliflower", "jackfruit"],
            "fish": ["tofu", "hearts of palm", "banana blossom"],
            "dairy": ["oat milk", "coconut cream", "cashew cream"],
            "cheese": ["nutritional yeast", "cashew cheese", "almond cheese"],
            "milk": ["almond milk", "oat milk", "coconut milk"],
            "butter": ["coconut oil", "olive oil", "vegan butter"],
            "eggs": ["flax eggs", "aquafaba", "chia eggs"],
            "honey": ["maple syrup", "agave nectar", "date syrup"]
        }
    },
    {
        "dietary_family": ["halal"],
        "conflicts_with": ["pork", "bacon", "ham", "alcohol", "wine", "beer", "gelatin"],
        "substitutions": {
            "pork": ["beef", "lamb", "chicken", "turkey"],
            "bacon": ["turkey bacon", "beef bacon", "halal bacon"],
            "ham": ["smoked turkey", "halal beef slices"],
            "wine": ["grape juice", "pomegranate juice", "halal cooking wine"],
            "beer": ["non-alcoholic malt beverage", "broth"],
            "alcohol": ["vinegar", "citrus juice", "broth"],
            "gelatin": ["agar-agar", "halal gelatin"]
        }
    },
    {
        "dietary_family": ["kosher"],
        "conflicts_with": ["pork", "shellfish", "shrimp", "lobster", "mixing meat and dairy"],
        "substitutions": {
            "pork": ["beef", "lamb", "chicken", "turkey"],
            "shellfish": ["fish with scales", "chicken", "vegetables"],
            "shrimp": ["white fish", "hearts of palm"],
            "lobster": ["white fish", "king oyster mushrooms"],
            "cream with meat": ["coconut cream", "cashew cream", "broth"]
        }
    },
    {
        "dietary_family": ["gluten-free", "gluten free", "celiac"],
        "conflicts_with": ["wheat", "pasta", "bread", "flour", "soy sauce", "beer", "noodles"],
        "substitutions": {
            "wheat": ["rice", "buckwheat", "millet"],
            "pasta": ["rice noodles", "zucchini noodles", "gluten-free pasta"],
            "bread": ["gluten-free bread", "lettuce wraps", "rice paper"],
            "flour": ["rice flour", "almond flour", "coconut flour"],
            "soy sauce": ["tamari", "coconut aminos", "gluten-free soy sauce"],
            "beer": ["gluten-free beer", "broth"],
            "noodles": ["rice noodles", "shirataki noodles", "zucchini noodles"]
        }
    },
    {
        "dietary_family": ["dairy-free", "dairy free", "lactose"],
        "conflicts_with": ["milk", "cheese", "butter", "cream", "yogurt"],
        "substitutions": {
            "milk": ["almond milk", "oat milk", "coconut milk"],
            "cheese": ["nutritional yeast", "dairy-free cheese", "cashew cheese"],
            "butter": ["coconut oil", "olive oil", "dairy-free butter"],
            "cream": ["coconut cream", "cashew cream", "oat cream"],
            "yogurt": ["coconut yogurt", "almond yogurt", "oat yogurt"]
        }
    },
    {
        "dietary_family": ["egg-free", "egg free", "no egg"],
        "conflicts_with": ["eggs", "egg yolk", "egg white", "mayonnaise"],
        "substitutions": {
            "eggs": ["flax eggs", "aquafaba", "silken tofu"],
            "egg yolk": ["aquafaba", "cornstarch slurry"],
            "egg white": ["aquafaba"],
            "mayonnaise": ["vegan mayonnaise", "mashed avocado", "hummus"]
        }
    },
    {
        "dietary_family": ["keto", "ketogenic", "low-carb", "low carb"],
        "conflicts_with": ["rice", "pasta", "bread", "potatoes", "sugar", "beans", "fruit"],
        "substitutions": {
            "rice": ["cauliflower rice", "shirataki rice", "broccoli rice"],
            "pasta": ["zucchini noodles", "shirataki noodles", "spaghetti squash"],
            "bread": ["lettuce wraps", "portobello caps", "cauliflower bread"],
            "potatoes": ["cauliflower", "turnips", "radishes"],
            "sugar": ["stevia", "erythritol", "monk fruit"],
            "beans": ["green beans", "asparagus", "broccoli"],
            "fruit": ["berries", "avocado"]
        }
    }
]

# --- Cultural substitution context ---
# Preferred substitute per cuisine and conflicting term, with how it is
# prepared and why it reads as authentic in that cuisine.
CULTURAL_SUBSTITUTION_CONTEXT: Dict[str, Dict[str, Dict[str, str]]] = {
    "Chinese": {
        "beef": {"substitute": "tofu", "preparation": "marinated in soy sauce and cornstarch", "cultural_note": "Tofu is traditional in Chinese cuisine"},
        "chicken": {"substitute": "mushrooms", "preparation": "shiitake or king oyster mushrooms", "cultural_note": "Mushrooms are prized in Chinese cooking"},
        "pork": {"substitute": "tempeh", "preparation": "five-spice seasoned tempeh", "cultural_note": "Maintains umami depth"}
    },
    "Italian": {
        "meat": {"substitute": "mushrooms", "preparation": "mixed wild mushrooms", "cultural_note": "Italy has rich vegetarian traditions"},
        "cheese": {"substitute": "nutritional yeast", "preparation": "with herbs and garlic", "cultural_note": "Provides umami like parmesan"}
    },
    "Mexican": {
        "beef": {"substitute": "black beans", "preparation": "seasoned with cumin and chili", "cultural_note": "Beans are traditional Mexican protein"},
        "cheese": {"substitute": "cashew crema", "preparation": "blended cashews with lime", "cultural_note": "Maintains creamy texture"}
    },
    "Indian": {
        "meat": {"substitute": "paneer", "preparation": "traditional preparation methods", "cultural_note": "India has extensive vegetarian tradition"},
        "chicken": {"substitute": "paneer", "preparation": "tandoori-spiced paneer cubes", "cultural_note": "Paneer takes the place of chicken in many North Indian curries"},
        "dairy": {"substitute": "coconut milk", "preparation": "full-fat coconut milk", "cultural_note": "Common in South Indian cuisine"}
    },
    "Japanese": {
        "meat": {"substitute": "tofu", "preparation": "silken or firm tofu", "cultural_note": "Tofu is central to shojin ryori"},
        "fish": {"substitute": "mushrooms", "preparation": "dashi-marinated mushrooms", "cultural_note": "Provides umami depth"}
    },
    "Thai": {
        "meat": {"substitute": "tofu", "preparation": "pressed and marinated tofu", "cultural_note": "Common in Thai Buddhist cuisine"},
        "fish sauce": {"substitute": "soy sauce with seaweed", "preparation": "adds oceanic flavor", "cultural_note": "Maintains umami profile"}
    }
}

# --- Severity classification ---
STRICT_RESTRICTIONS: Set[str] = {"vegan", "vegetarian", "gluten-free", "halal", "kosher"}
MAJOR_ALLERGEN_TERMS: Set[str] = {"milk", "eggs", "nuts", "shellfish", "wheat", "soy", "meat", "dairy", "gluten"}

# --- Substitute complexity heuristics ---
COMPLEX_SUBSTITUTES: List[str] = ["tempeh", "seitan", "cashew cheese"]
MEDIUM_SUBSTITUTES: List[str] = ["tofu", "mushrooms", "nutritional yeast"]

# Ordered: first match wins.
COOK_TIME_KEYWORDS: List[tuple] = [
    (("stir-fry", "stir fry"), 15),
    (("soup", "curry"), 30),
    (("baked", "casserole"), 45),
]
DEFAULT_COOK_TIME_MINUTES = 25

# Proteins from a cuisine profile that read as meat analogues.
PLANT_PROTEIN_TERMS: List[str] = ["tofu", "tempeh", "beans", "lentils", "chickpeas", "paneer", "seitan"]

# --- Plan assembly ---
MEAL_TYPES: List[str] = ["breakfast", "lunch", "dinner", "snack", "dessert"]

BASE_NUTRITION: Dict[str, int] = {"calories": 400, "protein_g": 25, "carbs_g": 45, "fat_g": 15}

CUISINE_CALORIE_MULTIPLIERS: Dict[str, float] = {
    "italian": 1.2,
    "southern us": 1.3,
    "french": 1.2,
    "mexican": 1.1,
    "indian": 1.1,
    "chinese": 0.9,
    "japanese": 0.85,
    "korean": 0.9,
    "vietnamese": 0.8,
    "thai": 0.95,
    "greek": 1.0,
    "lebanese": 1.0,
    "ethiopian": 0.95,
    "peruvian": 1.0
}

# Preference phrases that imply a dietary restriction when building a profile.
PREFERENCE_RESTRICTION_PHRASES: List[tuple] = [
    (("egg-free", "no egg"), "egg-free"),
    (("dairy-free", "no dairy"), "dairy-free"),
    (("gluten-free",), "gluten-free"),
    (("vegetarian",), "vegetarian"),
    (("vegan",), "vegan"),
]
