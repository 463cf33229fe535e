class InternalURIs:
    API = "/api"
    SEARCH = API + "/search"
    HEALTHZ = "/healthz"

class ExternalURIs:
    ANTHROPIC_MESSAGES = "https://api.anthropic.com/v1/messages"
    GOOGLE_CUSTOM_SEARCH = "https://customsearch.googleapis.com/customsearch/v1"


# Follow-up questions for fields the parser could not resolve, keyed by field name.
CLARIFICATION_QUESTIONS = {
    "caste": {
        "text": "What is your caste category?",
        "type": "select",
        "options": ["General", "SC", "ST", "OBC", "Other"],
    },
    "religion": {
        "text": "What is your religion?",
        "type": "select",
        "options": ["Hindu", "Muslim", "Christian", "Buddhist", "Sikh", "Other"],
    },
    "state": {
        "text": "Which state are you looking for scholarships in?",
        "type": "text",
    },
    "educationLevel": {
        "text": "What is your education level?",
        "type": "select",
        "options": [
            "High School",
            "Undergraduate",
            "Postgraduate",
            "PhD",
            "Diploma",
            "Professional Course",
        ],
    },
}
