# common.py - settings, colours, fonts and card surfaces for the pygame front end
import os
import json
import math
import pygame

from klondike.cards import is_red, RANK_TO_TEXT

# Defaults (may be overridden by persisted settings)
_DEFAULT_SETTINGS = {
    "card_size": "Medium",   # Small | Medium | Large
    "back_color": "Blue",    # Blue | Grey | Red
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)

_BACK_COLORS = {
    "Blue": (34, 96, 200),
    "Grey": (110, 110, 120),
    "Red": (170, 30, 40),
}

def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.klondike_solitaire
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeSolitaire")
    return os.path.join(os.path.expanduser("~"), ".klondike_solitaire")

def _settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")

def get_current_settings():
    return dict(_CURRENT_SETTINGS)

def load_settings(path=None):
    """Merge the persisted settings file over the defaults; bad files are ignored."""
    global _CURRENT_SETTINGS
    _CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)
    try:
        with open(path or _settings_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return get_current_settings()
    if isinstance(data, dict):
        size = str(data.get("card_size", _CURRENT_SETTINGS["card_size"])).capitalize()
        if size in ("Small", "Medium", "Large"):
            _CURRENT_SETTINGS["card_size"] = size
        back = str(data.get("back_color", _CURRENT_SETTINGS["back_color"])).capitalize()
        if back in _BACK_COLORS:
            _CURRENT_SETTINGS["back_color"] = back
    return get_current_settings()

def _size_to_dims(size_name: str):
    size_name = (size_name or "Medium").capitalize()
    if size_name == "Small":
        return 75, 105
    if size_name == "Large":
        return 150, 210
    return 100, 140

def apply_card_settings(size_name: str = None, back_color: str = None):
    # Update globals for gameplay rendering
    global BACK_COLOR, CARD_W, CARD_H
    if size_name is not None:
        CARD_W, CARD_H = _size_to_dims(size_name)
    if back_color is not None and back_color in _BACK_COLORS:
        BACK_COLOR = back_color
    invalidate_card_caches()


# ---------- Configuration ----------
SCREEN_W, SCREEN_H = 1280, 800
GREEN_TABLE = (2, 100, 40)
TABLE_BG = GREEN_TABLE

CARD_W, CARD_H = _size_to_dims(_DEFAULT_SETTINGS["card_size"])
BACK_COLOR = _DEFAULT_SETTINGS["back_color"]
CARD_RADIUS = 10
CARD_GAP_X = 18
CARD_GAP_Y = 26
TABLEAU_FAN_Y = 28

# UI bar heights
TOP_BAR_H = 60

# Colors
BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
MESSAGE = (255, 255, 180)

HEADER_SHADE = (0, 0, 0, 70)

# Fonts are created by setup_fonts() once pygame.init() has run
FONT_SMALL = None
FONT_UI = None
FONT_TITLE = None
FONT_CORNER_RANK = None

def setup_fonts():
    global FONT_SMALL, FONT_UI, FONT_TITLE, FONT_CORNER_RANK
    name = pygame.font.get_default_font()

    def bold(size):
        return pygame.font.SysFont(name, size, bold=True)

    FONT_SMALL, FONT_UI, FONT_TITLE = bold(20), bold(26), bold(44)
    # Corner index follows the card size chosen in settings
    FONT_CORNER_RANK = bold(max(16, CARD_W // 4))


# ---------- Suit pips ----------
# Heart outline on the unit curve x = 16 sin^3 t, y = 13 cos t - 5 cos 2t - 2 cos 3t - cos 4t
_HEART = [
    (16 * math.sin(t) ** 3,
     13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t))
    for t in (2 * math.pi * i / 36 for i in range(36))
]

def draw_pip(surface, suit, center, size, color):
    """Paint one suit symbol of height ``size`` centred on ``center``."""
    cx, cy = center
    if suit == "clubs":
        r = round(size * 0.22)
        for dx, dy in ((0.0, -0.24), (-0.25, 0.08), (0.25, 0.08)):
            pygame.draw.circle(surface, color, (round(cx + dx * size), round(cy + dy * size)), r)
    elif suit == "diamonds":
        h, w = size / 2, size * 0.36
        pygame.draw.polygon(surface, color, [(cx, cy - h), (cx + w, cy), (cx, cy + h), (cx - w, cy)])
    else:
        k = size / 30
        flip = -1 if suit == "hearts" else 1  # spades are hearts upside down
        pygame.draw.polygon(surface, color, [(cx + x * k, cy + flip * (y + 2.5) * k) for x, y in _HEART])
    if suit in ("clubs", "spades"):
        foot = size * 0.2
        pygame.draw.polygon(surface, color, [(cx, cy), (cx - foot, cy + size / 2), (cx + foot, cy + size / 2)])


# ---------- Card surfaces ----------
_surfaces = {}

def invalidate_card_caches():
    _surfaces.clear()

def _blank_card(fill):
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    outline = surf.get_rect()
    pygame.draw.rect(surf, fill, outline, border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, outline, width=2, border_radius=CARD_RADIUS)
    return surf

def _corner_index(suit, rank, color):
    label = FONT_CORNER_RANK.render(RANK_TO_TEXT[rank], True, color)
    pip = max(10, CARD_W // 6)
    w = max(label.get_width(), pip)
    block = pygame.Surface((w, label.get_height() + pip + 2), pygame.SRCALPHA)
    block.blit(label, ((w - label.get_width()) // 2, 0))
    draw_pip(block, suit, (w // 2, label.get_height() + 2 + pip // 2), pip, color)
    return block

def _paint_face(suit, rank):
    surf = _blank_card(WHITE)
    color = RED if is_red(suit) else BLACK
    index = _corner_index(suit, rank, color)
    surf.blit(index, (8, 8))
    flipped = pygame.transform.rotate(index, 180)
    surf.blit(flipped, flipped.get_rect(bottomright=(CARD_W - 8, CARD_H - 8)))
    draw_pip(surf, suit, (CARD_W // 2, CARD_H // 2), max(20, CARD_W // 2), color)
    return surf

def _paint_back():
    base = _BACK_COLORS.get(BACK_COLOR, _BACK_COLORS["Blue"])
    accent = tuple(min(255, c + 70) for c in base)
    surf = _blank_card(WHITE)
    panel = surf.get_rect().inflate(-12, -12)
    pygame.draw.rect(surf, base, panel, border_radius=max(2, CARD_RADIUS - 4))
    # Lattice of open diamonds
    step = max(10, CARD_W // 7)
    d = step // 3
    for y in range(panel.top + step // 2, panel.bottom - d, step):
        for x in range(panel.left + step // 2, panel.right - d, step):
            pygame.draw.polygon(surf, accent, [(x, y - d), (x + d, y), (x, y + d), (x - d, y)], 1)
    pygame.draw.rect(surf, accent, panel.inflate(-6, -6), width=1, border_radius=max(2, CARD_RADIUS - 6))
    return surf

def get_card_surface(suit, rank, face_up):
    """Surface for one card as the engine reports it: (suit, rank, face_up)."""
    key = (suit, rank) if face_up else "back"
    if key not in _surfaces:
        _surfaces[key] = _paint_face(suit, rank) if face_up else _paint_back()
    return _surfaces[key]


# ---------- Base Scene ----------
class Scene:
    """Full-window scene. Subclasses set ``title`` and override the hooks."""

    title = ""

    def __init__(self, app):
        self.app = app
        self.quit_requested = False

    def handle_event(self, e):
        pass

    def draw(self, screen):
        pass

    def status_text(self):
        return ""

    def draw_header(self, screen):
        shade = pygame.Surface((SCREEN_W, TOP_BAR_H), pygame.SRCALPHA)
        shade.fill(HEADER_SHADE)
        screen.blit(shade, (0, 0))
        title = FONT_TITLE.render(self.title, True, WHITE)
        screen.blit(title, (20, (TOP_BAR_H - title.get_height()) // 2))
        status = self.status_text()
        if status:
            text = FONT_UI.render(status, True, WHITE)
            screen.blit(text, (44 + title.get_width(), (TOP_BAR_H - text.get_height()) // 2))
