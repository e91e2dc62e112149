"""core

UI/LLM-independent game rules for the dungeon run.
"""

API_VERSION = "core-dungeon-v1"
