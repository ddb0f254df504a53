"""
Static cuisine reference tables.

- CUISINE_ENHANCEMENTS: metadata merged into legacy taxonomy entries when
  producing the v2 taxonomy.
- EMBEDDED_TAXONOMY: minimal taxonomy used only when no taxonomy file loads.
- FALLBACK_CONTEXT_TERMS: contextual keywords for pattern matching when a
  cuisine carries no metadata.
"""
from typing import Any, Dict, List

CUISINE_ENHANCEMENTS: Dict[str, Dict[str, Any]] = {
    "Southern US": {
        "metadata": {
            "origin": {
                "primary_region": "Southern United States",
                "countries": ["United States"],
                "geographic_tags": ["North America", "Southeast US"]
            },
            "characteristics": {
                "flavor_profile": ["hearty", "comfort", "rich", "smoky"],
                "cooking_methods": ["frying", "slow-cooking", "smoking", "braising"],
                "key_ingredients": ["cornmeal", "okra", "collard greens", "bacon"],
                "signature_dishes": ["fried chicken", "gumbo", "mac and cheese", "cornbread"]
            },
            "searchability": {
                "popularity_score": 8.5,
                "difficulty_level": "medium",
                "availability_score": 9.0,
                "keywords": ["comfort food", "southern", "louisiana", "hearty"]
            }
        },
        "related_cuisines": ["Caribbean", "French", "West African"]
    },
    "Italian": {
        "metadata": {
            "origin": {
                "primary_region": "Italy",
                "countries": ["Italy"],
                "geographic_tags": ["Southern Europe", "Mediterranean"]
            },
            "characteristics": {
                "flavor_profile": ["fresh", "aromatic", "simple", "herb-forward"],
                "cooking_methods": ["sauteing", "grilling", "slow-simmering", "wood-fired"],
                "key_ingredients": ["olive oil", "tomatoes", "basil", "garlic", "parmesan"],
                "signature_dishes": ["pasta carbonara", "pizza margherita", "risotto", "tiramisu"]
            },
            "searchability": {
                "popularity_score": 9.8,
                "difficulty_level": "easy-medium",
                "availability_score": 9.5,
                "keywords": ["pasta", "pizza", "sicily", "tuscany", "nonna"]
            }
        },
        "related_cuisines": ["French", "Spanish", "Greek"]
    },
    "Mexican": {
        "metadata": {
            "origin": {
                "primary_region": "Mexico",
                "countries": ["Mexico"],
                "geographic_tags": ["North America", "Latin America"]
            },
            "characteristics": {
                "flavor_profile": ["spicy", "complex", "earthy", "bright"],
                "cooking_methods": ["grilling", "braising", "steaming", "charring"],
                "key_ingredients": ["chiles", "corn", "black beans", "cilantro", "lime"],
                "signature_dishes": ["mole", "tacos", "tamales", "guacamole"]
            },
            "searchability": {
                "popularity_score": 9.5,
                "difficulty_level": "medium",
                "availability_score": 8.8,
                "keywords": ["salsa", "tortilla", "street food", "abuela"]
            }
        },
        "related_cuisines": ["Spanish", "Peruvian"]
    },
    "Chinese": {
        "metadata": {
            "origin": {
                "primary_region": "China",
                "countries": ["China", "Taiwan", "Hong Kong"],
                "geographic_tags": ["East Asia", "Asia-Pacific"]
            },
            "characteristics": {
                "flavor_profile": ["umami", "balanced", "aromatic"],
                "cooking_methods": ["stir-frying", "steaming", "braising", "deep-frying"],
                "key_ingredients": ["soy sauce", "ginger", "bok choy", "rice", "noodles"],
                "signature_dishes": ["kung pao chicken", "dim sum", "fried rice", "hot pot"]
            },
            "searchability": {
                "popularity_score": 9.7,
                "difficulty_level": "medium",
                "availability_score": 9.2,
                "keywords": ["wok", "stir fry", "dumplings", "beijing", "shanghai"]
            }
        },
        "related_cuisines": ["Japanese", "Korean", "Vietnamese", "Thai"]
    },
    "Indian": {
        "metadata": {
            "origin": {
                "primary_region": "Indian Subcontinent",
                "countries": ["India", "Pakistan", "Bangladesh"],
                "geographic_tags": ["South Asia", "Asia-Pacific"]
            },
            "characteristics": {
                "flavor_profile": ["spicy", "aromatic", "complex", "warming"],
                "cooking_methods": ["slow-cooking", "tempering", "tandoor", "grinding"],
                "key_ingredients": ["cumin", "turmeric", "garam masala", "lentils", "chiles"],
                "signature_dishes": ["butter chicken", "biryani", "dal", "naan", "curry"]
            },
            "searchability": {
                "popularity_score": 9.3,
                "difficulty_level": "medium-hard",
                "availability_score": 8.5,
                "keywords": ["masala", "mumbai", "delhi", "punjab"]
            }
        },
        "related_cuisines": ["Pakistani", "Bangladeshi", "Sri Lankan"]
    },
    "Japanese": {
        "metadata": {
            "origin": {
                "primary_region": "Japan",
                "countries": ["Japan"],
                "geographic_tags": ["East Asia", "Asia-Pacific"]
            },
            "characteristics": {
                "flavor_profile": ["umami", "clean", "delicate"],
                "cooking_methods": ["simmering", "grilling", "steaming", "raw preparation"],
                "key_ingredients": ["miso", "dashi", "nori", "short-grain rice"],
                "signature_dishes": ["sushi", "ramen", "tempura", "miso soup"]
            },
            "searchability": {
                "popularity_score": 9.4,
                "difficulty_level": "medium-hard",
                "availability_score": 8.0,
                "keywords": ["tokyo", "kyoto", "osaka", "bento"]
            }
        },
        "related_cuisines": ["Korean", "Chinese"]
    }
}

EMBEDDED_TAXONOMY: List[Dict[str, Any]] = [
    {
        "id": "italian",
        "label": "Italian",
        "aliases": ["Mediterranean Italian", "Tuscan", "Sicilian"],
        "metadata": {
            "searchability": {"keywords": ["pasta", "pizza", "sicily"]},
            "characteristics": {"key_ingredients": ["olive oil", "tomatoes", "basil"]}
        }
    },
    {
        "id": "mexican",
        "label": "Mexican",
        "aliases": ["Tex-Mex", "Oaxacan", "Yucatecan"],
        "metadata": {
            "searchability": {"keywords": ["tacos", "salsa", "street food"]},
            "characteristics": {"key_ingredients": ["chiles", "corn", "cilantro"]}
        }
    },
    {
        "id": "chinese",
        "label": "Chinese",
        "aliases": ["Cantonese", "Sichuan", "Mandarin"],
        "metadata": {
            "searchability": {"keywords": ["stir fry", "wok", "dim sum"]},
            "characteristics": {"key_ingredients": ["soy sauce", "ginger", "bok choy"]}
        }
    },
    {
        "id": "indian",
        "label": "Indian",
        "aliases": ["North Indian", "South Indian", "Bengali"],
        "metadata": {
            "searchability": {"keywords": ["curry", "masala", "naan"]},
            "characteristics": {"key_ingredients": ["cumin", "turmeric", "garam masala"]}
        }
    },
    {
        "id": "japanese",
        "label": "Japanese",
        "aliases": ["Washoku", "Traditional Japanese"],
        "metadata": {
            "searchability": {"keywords": ["sushi", "ramen", "bento"]},
            "characteristics": {"key_ingredients": ["miso", "dashi", "nori"]}
        }
    }
]

FALLBACK_CONTEXT_TERMS: Dict[str, List[str]] = {
    "Italian": ["pasta", "pizza", "risotto", "gelato", "parmesan", "basil", "olive oil", "rome", "italy", "milan", "nonna", "sicily"],
    "Mexican": ["tacos", "salsa", "guacamole", "mole", "tortilla", "mexico", "oaxaca", "puebla", "abuela"],
    "Chinese": ["noodles", "wok", "soy sauce", "dim sum", "china", "beijing", "shanghai", "taiwan"],
    "Indian": ["curry", "spices", "naan", "biryani", "turmeric", "india", "mumbai", "delhi", "bollywood"],
    "Japanese": ["sushi", "ramen", "miso", "sake", "tempura", "japan", "tokyo", "kyoto", "washoku"],
    "Korean": ["kimchi", "bulgogi", "bibimbap", "korea", "seoul", "korean bbq"],
    "Thai": ["pad thai", "coconut", "thailand", "bangkok", "thai basil"],
    "Vietnamese": ["pho", "banh mi", "vietnam", "saigon"],
    "Southern US": ["fried chicken", "gumbo", "cornbread", "louisiana", "texas"],
    "French": ["baguette", "croissant", "france", "paris", "provence"],
    "Greek": ["feta", "olives", "greece", "athens"],
    "Ethiopian": ["injera", "berbere", "ethiopia", "addis ababa", "east africa"],
    "Lebanese": ["hummus", "tabbouleh", "lebanon", "beirut", "middle east"],
    "Peruvian": ["quinoa", "ceviche", "peru", "lima", "andes"]
}

# Cuisines with deep vegetarian traditions, used for the by_dietary category.
VEGETARIAN_FRIENDLY_CUISINES: List[str] = ["Indian", "Italian", "Ethiopian"]
