import threading
from unittest.mock import MagicMock, patch
from types import SimpleNamespace

import pytest
from PIL import Image

from a4framer.errors import BatchInProgressError
from a4framer.frames import FONT_OPTIONS, FrameConfiguration, font_family_for
from a4framer.pipeline import FramePipeline, display_name, load_source_image
from a4framer.settings import FramerSettings


class TestLoading:

    @pytest.mark.parametrize('path, name', [
        ('photos/holiday.jpg', 'holiday'),
        ('holiday.beach.jpg', 'holiday'),
        ('/tmp/IMG_0001.PNG', 'IMG_0001'),
        ('noext', 'noext'),
    ])
    def test_display_name(self, path, name):
        assert display_name(path) == name

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_source_image(str(tmp_path / 'nope.jpg'))

    def test_palette_image_is_converted(self, tmp_path):
        path = tmp_path / 'pal.png'
        Image.new('RGB', (20, 10), 'red').convert('P').save(path)
        source = load_source_image(str(path))
        assert source.image.mode == 'RGB'
        assert (source.width, source.height) == (20, 10)
        assert source.name == 'pal'

    def test_alpha_is_kept(self, tmp_path):
        path = tmp_path / 'alpha.png'
        Image.new('LA', (10, 10), (0, 0)).save(path)
        assert load_source_image(str(path)).image.mode == 'RGBA'


class TestFramePipeline:

    def test_load_order_and_selection(self, photo_files):
        pipeline = FramePipeline().load(*photo_files)
        assert [s.name for s in pipeline.sources] == ['beach', 'tower']
        assert pipeline.current.name == 'beach'
        assert pipeline.select(1).current.name == 'tower'

    def test_select_out_of_range(self, photo_files):
        with pytest.raises(IndexError):
            FramePipeline().load(*photo_files).select(5)

    def test_remove_moves_selection_back(self, photo_files):
        pipeline = FramePipeline().load(*photo_files).select(1)
        pipeline.remove(1)
        assert pipeline.selected == 0
        pipeline.remove(0)
        assert pipeline.current is None

    def test_update_replaces_configuration(self):
        pipeline = FramePipeline()
        original = pipeline.config
        pipeline.update(margin_mm=20, is_bold=True)
        assert pipeline.config.margin_mm == 20 and pipeline.config.is_bold
        assert original.margin_mm == 15

    def test_render_without_images_gives_blank_frame(self):
        page = FramePipeline(FrameConfiguration(caption_text='')).render()
        assert page.size == (2480, 3508)

    def test_suggest_caption(self, photo_files):
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(text='Seaside')
        pipeline = FramePipeline().load(*photo_files)
        pipeline.suggest_caption(FramerSettings(api_key='k'), client=client)
        assert pipeline.config.caption_text == 'Seaside'

    def test_save_and_save_all(self, photo_files, tmp_path):
        out = tmp_path / 'out'
        pipeline = FramePipeline().load(*photo_files)

        assert pipeline.save(str(out)) == str(out / 'beach-framed.png')

        sleep = MagicMock()
        result = pipeline.save_all(str(out), delay=0.25, sleep=sleep)
        assert result.saved == ['beach-framed.png', 'tower-framed.png']
        assert sleep.call_count == 2
        assert Image.open(out / 'tower-framed.png').size == (2480, 3508)

    def test_second_save_all_refused_while_one_runs(self, photo_files, tmp_path):
        pipeline = FramePipeline().load(*photo_files)
        started, release = threading.Event(), threading.Event()

        def blocking_sleep(seconds):
            started.set()
            release.wait(5)

        results = []
        tiny = Image.new('RGB', (4, 4), 'white')
        with patch('a4framer.export.render_composition', return_value=tiny):
            worker = threading.Thread(
                target=lambda: results.append(pipeline.save_all(str(tmp_path / 'a'), sleep=blocking_sleep)))
            worker.start()
            try:
                assert started.wait(5)
                assert pipeline.is_exporting
                with pytest.raises(BatchInProgressError):
                    pipeline.save_all(str(tmp_path / 'b'), delay=0)
            finally:
                release.set()
                worker.join(5)

        assert not pipeline.is_exporting
        assert results[0].saved == ['beach-framed.png', 'tower-framed.png']
        assert not (tmp_path / 'b').exists()

    def test_same_name_twice_in_one_batch(self, photo_files, tmp_path):
        other = tmp_path / 'beach.png'
        Image.new('RGB', (50, 50), 'red').save(other)
        pipeline = FramePipeline().load(photo_files[0], str(other))

        tiny = Image.new('RGB', (4, 4), 'white')
        with patch('a4framer.export.render_composition', return_value=tiny):
            result = pipeline.save_all(str(tmp_path / 'out'), delay=0)

        assert result.saved == ['beach-framed.png', 'beach-framed (1).png']
        assert (tmp_path / 'out' / 'beach-framed (1).png').exists()


class TestFontOptions:

    def test_named_option(self):
        assert font_family_for('lato') == FONT_OPTIONS['lato']

    def test_family_list_and_path_pass_through(self):
        assert font_family_for('Georgia, serif') == 'Georgia, serif'
        assert font_family_for('/fonts/My.ttf') == '/fonts/My.ttf'

    def test_unknown(self):
        with pytest.raises(ValueError, match='Unknown font'):
            font_family_for('comic')
