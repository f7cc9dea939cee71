import os

GLOB_CHARS = set("*?[")

# characters that end a plain word
OPERATOR_CHARS = set("<>|")

# escape sequences allowed after a backslash, plain or quoted
ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "\\": "\\",
    " ": " ",
    "|": "|",
    "<": "<",
    ">": ">",
}

DEFAULT_PROMPT = os.environ.get("PIPESH_PROMPT", "#? ")
BANNER = "Welcome to pipesh!"

# bounds parser recursion
MAX_PIPELINE_STAGES = 128

EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXEC = 126
EXIT_SYNTAX = 2
