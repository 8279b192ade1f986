"""Static theme catalog."""

from pydantic import BaseModel, Field

from partyplan.matching.models.brief import NO_THEME


class ThemeInfo(BaseModel):
    id: str
    name: str
    keywords: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    decoration_style: str = "general"
    priority: str = "simple"


THEMES: dict[str, ThemeInfo] = {
    theme.id: theme
    for theme in [
        ThemeInfo(
            id=NO_THEME,
            name="No Theme",
            keywords=["simple", "general", "basic", "standard", "no-theme"],
            colors=["multicolor"],
            decoration_style="general",
            priority="simple",
        ),
        ThemeInfo(
            id="spiderman",
            name="Spider-Man",
            keywords=["spiderman", "spider", "web", "superhero", "marvel"],
            colors=["red", "blue"],
            decoration_style="superhero",
            priority="character",
        ),
        ThemeInfo(
            id="taylor-swift",
            name="Taylor Swift",
            keywords=["taylor", "swift", "pop", "star", "music", "concert", "eras"],
            colors=["pink", "purple", "gold"],
            decoration_style="glamorous",
            priority="music",
        ),
        ThemeInfo(
            id="princess",
            name="Princess",
            keywords=[
                "princess",
                "fairy",
                "castle",
                "royal",
                "crown",
                "dress",
                "magic",
                "elegant",
            ],
            colors=["pink", "purple", "gold"],
            decoration_style="elegant",
            priority="character",
        ),
        ThemeInfo(
            id="dinosaur",
            name="Dinosaur",
            keywords=[
                "dinosaur",
                "dino",
                "prehistoric",
                "jurassic",
                "t-rex",
                "fossil",
                "adventure",
            ],
            colors=["green", "brown", "orange"],
            decoration_style="adventure",
            priority="educational",
        ),
        ThemeInfo(
            id="unicorn",
            name="Unicorn",
            keywords=[
                "unicorn",
                "rainbow",
                "magical",
                "sparkle",
                "fantasy",
                "horn",
                "pastel",
            ],
            colors=["pink", "purple", "rainbow"],
            decoration_style="magical",
            priority="fantasy",
        ),
        ThemeInfo(
            id="science",
            name="Science",
            keywords=[
                "science",
                "experiment",
                "laboratory",
                "chemistry",
                "stem",
                "educational",
            ],
            colors=["blue", "green", "white"],
            decoration_style="educational",
            priority="educational",
        ),
        ThemeInfo(
            id="superhero",
            name="Superhero",
            keywords=["superhero", "hero", "captain", "marvel", "batman", "super", "power"],
            colors=["red", "blue", "yellow"],
            decoration_style="action-packed",
            priority="character",
        ),
    ]
}


def get_theme(theme_id: str) -> ThemeInfo:
    """Look up a theme, synthesising a bare entry for ids not in the table."""
    theme = THEMES.get(theme_id)
    if theme is not None:
        return theme
    return ThemeInfo(id=theme_id, name=theme_id)


def available_themes() -> list[ThemeInfo]:
    return list(THEMES.values())


def theme_suggestions(child_age: int) -> list[str]:
    """Age-appropriate theme ids, most popular first."""
    if child_age <= 4:
        return ["unicorn", "princess", "dinosaur"]
    if child_age <= 7:
        return ["spiderman", "princess", "dinosaur", "unicorn"]
    if child_age <= 10:
        return ["spiderman", "taylor-swift", "science", "dinosaur"]
    return ["taylor-swift", "science", "spiderman"]
