"""Tests for the PaletteGenerator module."""

import pytest

from sacredscope.core.analyzer import AudioFeatures, FeatureAnalyzer, Mood
from sacredscope.core.color import Color
from sacredscope.core.context import ContextClassifier, Genre, MusicContext
from sacredscope.core.palette import (
    ColorPalette,
    PaletteGenerator,
    base_hue,
    mood_name,
    particle_count,
    shift_towards_warmth,
)


def make_features(**overrides) -> AudioFeatures:
    values = dict(
        bass=0.0, mid=0.0, treble=0.0, rhythm=0.0, melody=0.0,
        harmony=0.0, dynamics=0.0, energy=0.0, tempo=120.0, mood=Mood.JOYFUL,
    )
    values.update(overrides)
    return AudioFeatures(**values)


def make_context(**overrides) -> MusicContext:
    values = dict(
        beat_drop=False, vocal_presence=False, instrumental_density=0.0,
        emotional_intensity=0.0, genre_hint=Genre.ACOUSTIC,
    )
    values.update(overrides)
    return MusicContext(**values)


def analyze(frame, analyzer=None):
    analyzer = analyzer or FeatureAnalyzer()
    features = analyzer.analyze(frame)
    context = ContextClassifier().classify(features, frame, analyzer.previous_features)
    return features, context


def all_colors(palette: ColorPalette) -> list[Color]:
    return list(palette.named().values()) + list(palette.particles)


class TestMood:
    def test_silent_input(self, zero_frame):
        features, context = analyze(zero_frame)
        mood = PaletteGenerator(seed=0).analyze_mood(features, context)

        assert mood.saturation == 40
        assert mood.brightness == 30
        assert mood.contrast == 20
        assert mood.name == "gentle-mysterious-chaotic"
        # Acoustic sets warm, then the mysterious mood overrides to cool
        assert mood.temperature == "cool"

    def test_later_temperature_rule_wins(self):
        generator = PaletteGenerator(seed=0)
        context = make_context(genre_hint=Genre.ROCK)
        assert generator.analyze_mood(make_features(bass=0.7), context).temperature == "cool"
        assert generator.analyze_mood(make_features(bass=0.7, harmony=0.7), context).temperature == "warm"
        assert generator.analyze_mood(make_features(), context).temperature == "neutral"

    def test_saturation_capped(self):
        mood = PaletteGenerator(seed=0).analyze_mood(
            make_features(energy=1.0, dynamics=1.0, treble=1.0),
            make_context(emotional_intensity=1.0),
        )
        assert mood.saturation == 100
        assert mood.brightness == 100
        assert mood.contrast == 100

    def test_mood_name(self):
        assert mood_name(Mood.CALM, 0.7, 0.7) == "intense-calm-harmonious"
        assert mood_name(Mood.JOYFUL, 0.4, 0.4) == "moderate-joyful-balanced"


class TestBasePalette:
    def test_acoustic_silent_hue(self, zero_frame):
        features, context = analyze(zero_frame)
        assert base_hue(features, context) == 30

    @pytest.mark.parametrize(
        "genre, features, expected",
        [
            (Genre.ELECTRONIC, dict(bass=1.0), 300),
            (Genre.CLASSICAL, dict(harmony=0.5), 240),
            (Genre.ROCK, dict(energy=0.5), 30),
            (Genre.AMBIENT, dict(mid=1.0), 300),
            (Genre.MIXED, dict(bass=1.0, treble=1.0), 0),
        ],
    )
    def test_genre_hue_table(self, genre, features, expected):
        hue = base_hue(make_features(**features), make_context(genre_hint=genre))
        assert hue == pytest.approx(expected)

    def test_voice_hue_depends_on_vocals(self):
        features = make_features()
        assert base_hue(features, make_context(genre_hint=Genre.VOICE)) == 200
        with_vocals = make_context(genre_hint=Genre.VOICE, vocal_presence=True, emotional_intensity=0.5)
        assert base_hue(features, with_vocals) == pytest.approx(90)

    def test_derived_colors(self, zero_frame):
        features, context = analyze(zero_frame)
        generator = PaletteGenerator(seed=0)
        palette = generator.create_base_palette(features, context, generator.analyze_mood(features, context))

        assert palette.primary == Color(30, 40, 30)
        assert palette.secondary.hue == pytest.approx(150)
        assert palette.secondary.saturation == pytest.approx(32)
        assert palette.secondary.lightness == pytest.approx(27)
        assert palette.accent.hue == pytest.approx(270)
        assert palette.accent.saturation == pytest.approx(48)
        assert palette.accent.lightness == pytest.approx(33)
        assert palette.background.hue == pytest.approx(210)
        assert palette.background.saturation == pytest.approx(12)
        assert palette.background.lightness == pytest.approx(6)
        assert palette.glow.saturation == pytest.approx(60)
        assert palette.glow.lightness == pytest.approx(39)

    @pytest.mark.parametrize(
        "energy, count",
        [(0.0, 3), (0.2, 4), (0.5, 5), (1.0, 8), (2.0, 8), (-1.0, 3)],
    )
    def test_particle_count(self, energy, count):
        assert particle_count(energy) == count

    def test_particle_jitter_bounds(self):
        generator = PaletteGenerator(seed=7)
        for _ in range(50):
            particles = generator.generate_particle_colors(100, 50, 85, 1.0)
            assert len(particles) == 8
            for i, color in enumerate(particles):
                assert color.hue == pytest.approx((100 + i * 45) % 360)
                assert 35 <= color.saturation <= 65
                assert 10 <= color.lightness <= 90

    def test_seeded_generators_agree(self, random_frames):
        features, context = analyze(random_frames[0])
        a = PaletteGenerator(seed=3).generate(features, context)
        b = PaletteGenerator(seed=3).generate(features, context)
        assert a == b


class TestRefinement:
    def test_beat_drop_intensifies(self):
        generator = PaletteGenerator(seed=0)
        color = Color(30, 80, 70)
        palette = ColorPalette(color, color, color, color, color, (color,))
        refined = generator.refine_for_context(palette, make_context(beat_drop=True))

        assert refined.primary == Color(30, 100, 90)
        assert refined.accent == Color(30, 100, 90)
        assert refined.glow == Color(30, 100, 90)
        assert refined.particles == (Color(30, 100, 90),)
        assert refined.secondary == color
        assert refined.background == color

    def test_shift_towards_warmth(self):
        assert shift_towards_warmth(200, 0.3) == pytest.approx(158)
        assert shift_towards_warmth(350, 0.3) % 360 == pytest.approx(353)
        assert shift_towards_warmth(30, 0.3) == pytest.approx(30)

    def test_vocals_warm_selected_colors(self):
        generator = PaletteGenerator(seed=0)
        color = Color(200, 50, 50)
        palette = ColorPalette(color, color, color, color, color, (color,))
        refined = generator.refine_for_context(palette, make_context(vocal_presence=True))

        assert refined.primary.hue == pytest.approx(158)
        assert refined.secondary.hue == pytest.approx(158)
        assert refined.glow.hue == pytest.approx(158)
        assert refined.accent == color
        assert refined.particles == (color,)

    def test_density_adds_particles(self):
        generator = PaletteGenerator(seed=0)
        particles = tuple(Color(i * 45, 50, 50) for i in range(8))
        extended = generator.add_complexity(particles)
        assert len(extended) == 12
        assert extended[:8] == particles

        assert len(generator.add_complexity(particles[:3])) == 4
        assert generator.add_complexity(()) == ()

    def test_density_extras_capped_at_five(self):
        generator = PaletteGenerator(seed=0)
        particles = tuple(Color(i, 50, 50) for i in range(12))
        assert len(generator.add_complexity(particles)) == 17

    def test_high_intensity_boosts_saturation(self):
        generator = PaletteGenerator(seed=0)
        color = Color(10, 50, 50)
        palette = ColorPalette(color, color, color, color, color, (color,))
        refined = generator.refine_for_context(palette, make_context(emotional_intensity=0.9))

        assert refined.primary.saturation == pytest.approx(72.5)
        assert refined.accent.saturation == pytest.approx(72.5)
        assert refined.particles[0].saturation == pytest.approx(72.5)
        assert refined.background == color
        assert refined.glow == color


class TestSmoothing:
    def test_first_palette_unsmoothed(self, zero_frame):
        features, context = analyze(zero_frame)
        palette = PaletteGenerator(seed=0).generate(features, context)
        assert palette.primary == Color(30, 40, 30)
        assert len(palette.particles) == 3

    def test_blends_toward_new_palette(self, zero_frame, uniform_frame):
        generator = PaletteGenerator(transition_speed=0.5, seed=0)
        generator.generate(*analyze(zero_frame))
        palette = generator.generate(*analyze(uniform_frame))

        # Target primary: electronic hue 300 warmed to 318, sat 100, light 80
        assert palette.primary.hue == pytest.approx(354)
        assert palette.primary.saturation == pytest.approx(70)
        assert palette.primary.lightness == pytest.approx(55)

    def test_new_particles_pass_through(self, zero_frame, uniform_frame):
        generator = PaletteGenerator(transition_speed=0.5, seed=0)
        first = generator.generate(*analyze(zero_frame))
        palette = generator.generate(*analyze(uniform_frame))
        assert len(first.particles) == 3
        assert len(palette.particles) > 3

    def test_converges_under_constant_input(self, zero_frame, uniform_frame):
        generator = PaletteGenerator(seed=0)
        generator.generate(*analyze(uniform_frame))
        features, context = analyze(zero_frame)
        for _ in range(300):
            palette = generator.generate(features, context)

        target = generator.create_base_palette(
            features, context, generator.analyze_mood(features, context)
        )
        for name, color in palette.named().items():
            expected = target.named()[name]
            assert color.hue == pytest.approx(expected.hue, abs=1e-6)
            assert color.saturation == pytest.approx(expected.saturation, abs=1e-6)
            assert color.lightness == pytest.approx(expected.lightness, abs=1e-6)

    def test_speed_one_disables_smoothing(self, zero_frame, uniform_frame):
        generator = PaletteGenerator(transition_speed=1.0, seed=0)
        generator.generate(*analyze(uniform_frame))
        palette = generator.generate(*analyze(zero_frame))
        assert palette.primary == Color(30, 40, 30)

    def test_set_transition_speed_clamped(self):
        generator = PaletteGenerator()
        generator.set_transition_speed(0.0)
        assert generator.transition_speed == 0.01
        generator.set_transition_speed(5)
        assert generator.transition_speed == 1.0

    def test_history_capped(self, random_frames):
        generator = PaletteGenerator(seed=0)
        analyzer = FeatureAnalyzer()
        for frame in random_frames:
            generator.generate(*analyze(frame, analyzer))
        assert len(generator.history) == 10
        assert generator.current is generator.history.last()

    def test_clamp_invariant(self, random_frames):
        generator = PaletteGenerator(seed=11)
        analyzer = FeatureAnalyzer()
        # Out-of-range input drives saturation/lightness factors past the caps
        frames = random_frames + [frame * 3 for frame in random_frames]
        for frame in frames:
            palette = generator.generate(*analyze(frame, analyzer))
            for color in all_colors(palette):
                assert 0 <= color.hue < 360
                assert 0 <= color.saturation <= 100
                assert 0 <= color.lightness <= 100

    def test_reset(self, zero_frame):
        generator = PaletteGenerator(seed=0)
        generator.generate(*analyze(zero_frame))
        generator.reset()
        assert generator.current is None


class TestSerialization:
    def test_dict_round_trip(self, random_frames):
        palette = PaletteGenerator(seed=5).generate(*analyze(random_frames[1]))
        data = palette.to_dict()
        assert data["primary"].startswith("hsl(")
        assert ColorPalette.from_dict(data) == palette

    def test_palette_from_dict_needs_css(self):
        with pytest.raises(ValueError):
            ColorPalette.from_dict({
                "primary": "red", "secondary": "red", "accent": "red",
                "background": "red", "glow": "red",
            })
