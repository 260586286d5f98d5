# scene.py - Klondike game scene: gestures in, engine commands out, board drawn from engine state
import pygame

from klondike import common as C
from klondike.engine import GameEvent, KlondikeGame, pile_view
from klondike.layout import BoardLayout
from klondike.ui import CommandBar, CommandButton

WIN_MESSAGE = "Congratulations! You won! Press N for a new game."


class KlondikeGameScene(C.Scene):
    title = "Klondike"

    def __init__(self, app, seed=None, game=None):
        super().__init__(app)
        self.game = game or KlondikeGame(seed=seed)
        self.layout = BoardLayout(self.game)
        self.message = ""
        self.drag = None          # (SelectionHandle, (offset_x, offset_y))
        self.drag_pos = (0, 0)
        # What the board looked like at the last engine notification; drawing reads only this
        self.views = {}
        self.moves = 0

        # Auto-finish stepping
        self.auto_play_active = False
        self.auto_last_time = 0
        self.auto_interval_ms = 180

        self.toolbar = CommandBar([
            CommandButton("New", self.new_game),
            CommandButton("Restart", self.restart),
            CommandButton("Undo", self.undo, self.game.can_undo),
            CommandButton("Auto", self.start_auto_finish, self.game.can_autofinish),
        ])
        self.toolbar.place(C.SCREEN_W - 12, C.TOP_BAR_H)
        self.game.subscribe(self._on_game_event)
        self.sync_views()

    # ---------- Engine wiring ----------
    def sync_views(self):
        self.views = {p.name: pile_view(p) for p in self.game.all_piles()}
        self.moves = self.game.move_count

    def _on_game_event(self, event: GameEvent):
        if event.kind == "changed":
            self.sync_views()
        elif event.kind == "won":
            self.message = WIN_MESSAGE
            self.auto_play_active = False

    def new_game(self):
        self.drag = None
        self.auto_play_active = False
        self.message = ""
        self.game.new_game()

    def restart(self):
        self.drag = None
        self.auto_play_active = False
        self.message = ""
        self.game.restart()

    def undo(self):
        self.drag = None
        self.auto_play_active = False
        if self.game.undo() and not self.game.is_won:
            self.message = ""

    def start_auto_finish(self):
        if not self.game.can_autofinish():
            return
        self.auto_play_active = True
        self.auto_last_time = pygame.time.get_ticks()

    def step_auto_finish(self):
        if not self.game.autofinish_step():
            self.auto_play_active = False

    def compute_layout(self):
        self.layout.compute()
        self.toolbar.place(C.SCREEN_W - 12, C.TOP_BAR_H)

    # ---------- Event handling ----------
    def handle_event(self, e):
        if self.toolbar.handle_event(e):
            return

        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            mx, my = e.pos
            if self.layout.stock.top_rect().collidepoint((mx, my)):
                self.game.draw_from_stock()
                return
            slot, hi = self.layout.slot_at((mx, my))
            if slot is None or hi is None or hi < 0:
                return
            card = slot.pile.cards[hi]
            handle = self.game.begin_selection(slot.pile, card)
            if handle is not None:
                r = slot.rect_for_index(hi)
                self.drag = (handle, (mx - r.x, my - r.y))
                self.drag_pos = (mx, my)

        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 3:
            # Right click sends the top card to its foundation
            slot, hi = self.layout.slot_at(e.pos)
            if slot is not None and hi is not None and hi >= 0:
                self.game.move_to_foundation(slot.pile)

        elif e.type == pygame.MOUSEMOTION:
            if self.drag:
                self.drag_pos = e.pos

        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            if not self.drag:
                return
            handle, _ = self.drag
            self.drag = None
            target = self.layout.drop_target(e.pos)
            if target is None:
                self.game.cancel_selection()
                return
            self.game.resolve_drop(handle, target)

        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.new_game()
            elif e.key == pygame.K_r:
                self.restart()
            elif e.key == pygame.K_u:
                self.undo()
            elif e.key == pygame.K_a:
                self.start_auto_finish()
            elif e.key == pygame.K_ESCAPE:
                self.quit_requested = True

    # ---------- Drawing ----------
    def status_text(self):
        return f"Moves: {self.moves}"

    def draw(self, screen):
        if self.auto_play_active:
            now = pygame.time.get_ticks()
            if now - self.auto_last_time >= self.auto_interval_ms:
                self.step_auto_finish()
                self.auto_last_time = now

        screen.fill(C.TABLE_BG)
        self.draw_header(screen)
        self.toolbar.draw(screen)

        source, lifted = (self.drag[0].source, len(self.drag[0].cards)) if self.drag else (None, 0)
        for slot in self.layout.slots:
            slot.draw(screen, self.views.get(slot.pile.name, ()), lifted if slot.pile is source else 0)

        for slot, label in ((self.layout.stock, "Stock"), (self.layout.waste, "Waste")):
            lab = C.FONT_SMALL.render(label, True, C.WHITE)
            screen.blit(lab, (slot.x + (C.CARD_W - lab.get_width())//2, slot.y - 22))

        if self.drag:
            handle, (ox, oy) = self.drag
            mx, my = self.drag_pos
            for i, card in enumerate(self.views[handle.source.name][-lifted:]):
                screen.blit(C.get_card_surface(*card), (mx - ox, my - oy + i * C.TABLEAU_FAN_Y))

        if self.message:
            msg = C.FONT_UI.render(self.message, True, C.MESSAGE)
            screen.blit(msg, (C.SCREEN_W//2 - msg.get_width()//2, C.SCREEN_H - 40))
