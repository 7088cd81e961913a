from __future__ import annotations

from pathlib import Path

GAME_ID = "mountandblade2bannerlord"

MODULES = "Modules"
SUBMOD_FILE = "submodule.xml"

OFFICIAL_MODULES = frozenset(
    {
        "Native",
        "SandBoxCore",
        "BirthAndDeath",
        "CustomBattle",
        "Sandbox",
        "StoryMode",
        "Multiplayer",
    }
)
REQUIRED_MODULES = ("Native",)

BANNERLORD_EXEC = "bin/Win64_Shipping_Client/Bannerlord.exe"

PARAMS_TEMPLATE = ("/{{gameMode}}", "_MODULES_{{subModIds}}*_MODULES_")
GAME_MODE_SINGLEPLAYER = "singleplayer"
SUBMOD_ID_MARKER = "*"

LAUNCHER_DATA_RELATIVE = Path("Mount and Blade II Bannerlord") / "Configs" / "LauncherData.xml"


def default_launcher_data_path() -> Path:
    return Path.home() / "Documents" / LAUNCHER_DATA_RELATIVE
