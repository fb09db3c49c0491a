from duel.logic.battlefield import build_battlefield
from duel.server.settings import DuelServerSettings


class TestBuildBattlefield:
    def test_castles_mirrored_on_ground(self):
        settings = DuelServerSettings(
            canvas_width=1000,
            canvas_height=500,
            castle_width=40,
            castle_height=30,
            castle_margin=60,
        )
        field = build_battlefield(settings)
        left, right = field.castles

        assert (left.player_id, left.x, left.y) == (0, 60, 470)
        assert (right.player_id, right.x, right.y) == (1, 900, 470)
        assert right.x + right.width == settings.canvas_width - settings.castle_margin

    def test_carries_gravity_and_canvas(self):
        field = build_battlefield(DuelServerSettings(gravity=450.0))
        dumped = field.model_dump(by_alias=True)

        assert dumped["gravity"] == 450.0
        assert dumped["canvasWidth"] == 800
        assert dumped["canvasHeight"] == 600
