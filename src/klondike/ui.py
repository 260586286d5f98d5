# ui.py - the command strip in the header: one button per game command
import pygame
from typing import Callable, List, Optional

PAD_X = 14
SPACING = 6

FILL = {"idle": (232, 232, 238), "hover": (212, 214, 226), "off": (196, 198, 204)}
INK = {"on": (28, 28, 34), "off": (124, 124, 134)}
EDGE = (150, 152, 164)

_FONT = None


def button_font():
    global _FONT
    if _FONT is None:
        _FONT = pygame.font.SysFont(pygame.font.get_default_font(), 22, bold=True)
    return _FONT


class CommandButton:
    """A label bound to a game command; ``available`` decides whether it can fire."""

    def __init__(self, label: str, command: Callable[[], object], available: Optional[Callable[[], bool]] = None):
        self.label = label
        self.command = command
        self.available = available or (lambda: True)
        self.hover = False
        w, h = button_font().size(label)
        self.rect = pygame.Rect(0, 0, w + 2 * PAD_X, h + 12)

    def fire(self) -> bool:
        if not self.available():
            return False
        self.command()
        return True

    def draw(self, surface: pygame.Surface):
        on = self.available()
        state = "off" if not on else ("hover" if self.hover else "idle")
        pygame.draw.rect(surface, FILL[state], self.rect, border_radius=6)
        pygame.draw.rect(surface, EDGE, self.rect, width=1, border_radius=6)
        text = button_font().render(self.label, True, INK["on" if on else "off"])
        surface.blit(text, text.get_rect(center=self.rect.center))


class CommandBar:
    """Buttons packed right to left against the window edge, vertically centred in the header."""

    def __init__(self, buttons: List[CommandButton]):
        self.buttons = buttons

    def place(self, right: int, header_h: int):
        x = right
        for b in reversed(self.buttons):
            x -= b.rect.width
            b.rect.topleft = (x, (header_h - b.rect.height) // 2)
            x -= SPACING

    def find(self, label: str) -> Optional[CommandButton]:
        return next((b for b in self.buttons if b.label == label), None)

    def handle_event(self, e) -> bool:
        if e.type == pygame.MOUSEMOTION:
            for b in self.buttons:
                b.hover = b.rect.collidepoint(e.pos)
            return False
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            for b in self.buttons:
                if b.rect.collidepoint(e.pos):
                    # A click on a disabled button is still swallowed
                    b.fire()
                    return True
        return False

    def draw(self, surface: pygame.Surface):
        for b in self.buttons:
            b.draw(surface)
