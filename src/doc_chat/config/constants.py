"""Fixed constants shared across modules."""

SENTENCE_SPLIT_PATTERN = r"(?<=[.!?])\s+"

RECURSIVE_SEPARATORS = ("\n\n", "\n", ". ", " ")

PATH_SEPARATOR = ">"

MAX_EXTRACTED_KEYWORDS = 10

STOPWORDS = frozenset(
    {
        "a", "about", "after", "all", "also", "am", "an", "and", "any", "are", "as",
        "at", "be", "because", "been", "before", "being", "between", "both", "but",
        "by", "can", "could", "did", "do", "does", "doing", "done", "for", "from",
        "get", "give", "had", "has", "have", "having", "he", "her", "here", "hers",
        "him", "his", "how", "i", "if", "in", "into", "is", "it", "its", "just",
        "let", "me", "more", "most", "my", "need", "no", "not", "now", "of", "on",
        "once", "only", "or", "other", "our", "out", "over", "please", "same",
        "she", "should", "show", "so", "some", "such", "tell", "than", "that",
        "the", "their", "them", "then", "there", "these", "they", "this", "those",
        "through", "to", "too", "under", "up", "us", "very", "was", "we", "were",
        "what", "when", "where", "which", "while", "who", "whom", "why", "will",
        "with", "would", "you", "your",
    }
)

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
)

GREETING_PATTERNS = (
    "hello", "hi", "hey", "good morning", "good afternoon", "good evening",
    "thanks", "thank you", "bye", "goodbye",
)
