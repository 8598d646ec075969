import json
import random

import pytest

from lexiflow.config import SettingsManager
from lexiflow.models import Card, ColumnRole
from lexiflow.services import StudySessionStore
from lexiflow.services.session_store import CUSTOM_CARD_ORDERS, STARRED_CARDS, THEME_NAME


def terms(cards):
    return [card.term for card in cards]


def keys(cards):
    return [card.key for card in cards]


class TestLoading:
    def test_cards_follow_row_order(self, store, write_deck):
        path = write_deck("words.csv", "Word,Meaning\ncat,a feline\ndog,a canine\n")

        assert store.load_from_path(path)

        assert [(c.term, c.definition) for c in store.all_cards] == [
            ("cat", "a feline"),
            ("dog", "a canine"),
        ]
        assert store.active_cards == store.all_cards
        assert store.list_mode_cards == store.all_cards
        assert store.current_card.term == "cat"
        assert store.error_message is None

    def test_columns_detected_from_header_names(self, store, write_deck):
        path = write_deck("deck.csv", "ID,My Definition,Key Term\n1,hello,hola\n")

        store.load_from_path(path)

        assert store.term_column == 2
        assert store.definition_column == 1
        assert [(c.term, c.definition) for c in store.all_cards] == [("hola", "hello")]

    def test_single_column_maps_both_roles_to_it(self, store, write_deck):
        path = write_deck("deck.csv", "Words\nsolo\n")

        store.load_from_path(path)

        assert (store.term_column, store.definition_column) == (0, 0)
        assert [(c.term, c.definition) for c in store.all_cards] == [("solo", "solo")]

    def test_rows_with_empty_mapped_field_are_skipped(self, store, write_deck):
        path = write_deck("deck.csv", "Term,Definition\n,x\ny,\nz,ok\n")

        store.load_from_path(path)

        assert [(c.term, c.definition) for c in store.all_cards] == [("z", "ok")]

    def test_load_failure_only_sets_error(self, store, animals_csv, write_deck):
        store.load_from_path(animals_csv)
        before = list(store.all_cards)
        empty = write_deck("empty.csv", "\n  \n")

        assert not store.load_from_path(empty)

        assert store.error_message == "No data found in CSV."
        assert store.all_cards == before
        assert store.deck_path == str(animals_csv)
        assert str(empty) not in [deck.path for deck in store.recent_decks]

    def test_missing_file_is_a_load_failure(self, store, tmp_path):
        assert not store.load_from_path(tmp_path / "gone.csv")
        assert store.error_message == "No data found in CSV."
        assert not store.has_deck

    def test_load_records_recent_deck_and_name(self, store, animals_csv):
        store.load_from_path(animals_csv)

        assert store.current_deck_name == "animals"
        assert [deck.path for deck in store.recent_decks] == [str(animals_csv)]

    def test_remap_and_regenerate_is_idempotent(self, store, write_deck):
        path = write_deck("deck.csv", "A,B,C\na1,b1,c1\na2,b2,c2\n,b3,c3\n")
        store.load_from_path(path)

        assert store.remap_column(ColumnRole.TERM, 2)
        store.regenerate_cards()
        first = [(c.term, c.definition) for c in store.all_cards]
        store.remap_column(ColumnRole.TERM, 2)
        store.regenerate_cards()
        second = [(c.term, c.definition) for c in store.all_cards]

        assert first == second == [("c1", "b1"), ("c2", "b2"), ("c3", "b3")]

    def test_detect_columns_after_manual_remap(self, store, write_deck):
        store.load_from_path(write_deck("deck.csv", "Notes,Definition,Term\nn,d,t\n"))
        store.remap_column(ColumnRole.TERM, 0)
        store.remap_column(ColumnRole.DEFINITION, 0)

        store.auto_detect_columns()

        assert (store.term_column, store.definition_column) == (2, 1)

    def test_remap_out_of_range_is_ignored(self, store, animals_csv):
        store.load_from_path(animals_csv)

        assert not store.remap_column(ColumnRole.DEFINITION, 5)
        assert store.definition_column == 1

    def test_regenerate_gives_fresh_identities(self, store, animals_csv):
        store.load_from_path(animals_csv)
        old_ids = {card.uuid for card in store.all_cards}

        store.regenerate_cards()

        assert old_ids.isdisjoint(card.uuid for card in store.all_cards)


class TestTableEditing:
    def test_add_row_matches_header_width_and_marks_dirty(self, store, write_deck):
        store.load_from_path(write_deck("deck.csv", "A,B,C\n1,2,3\n"))

        index = store.add_row()

        assert index == 1
        assert store.table.rows[1] == ["", "", ""]
        assert store.is_dirty

    def test_edits_mark_dirty(self, store, animals_csv):
        store.load_from_path(animals_csv)
        assert not store.is_dirty

        assert store.set_cell(0, 1, "a cat")
        assert store.set_header(0, "Term")
        assert store.table.rows[0] == ["cat", "a cat"]
        assert store.table.headers[0] == "Term"
        assert store.is_dirty

    def test_delete_row(self, store, animals_csv):
        store.load_from_path(animals_csv)

        assert store.delete_row(0)
        assert not store.delete_row(99)
        assert store.table.rows[0][0] == "dog"

    def test_delete_mapped_column_resets_it_and_shifts_the_other(self, store, write_deck):
        store.load_from_path(write_deck("deck.csv", "Notes,Term,Definition\nn,t,d\n"))
        assert (store.term_column, store.definition_column) == (1, 2)

        store.delete_column(1)

        assert store.term_column == 0
        assert store.definition_column == 1
        assert store.table.headers == ["Notes", "Definition"]
        assert store.table.rows == [["n", "d"]]

    def test_delete_column_before_both_mappings_shifts_both(self, store, write_deck):
        store.load_from_path(write_deck("deck.csv", "Notes,Term,Definition\nn,t,d\n"))

        store.delete_column(0)

        assert (store.term_column, store.definition_column) == (0, 1)

    def test_delete_column_after_mappings_keeps_them(self, store, write_deck):
        store.load_from_path(write_deck("deck.csv", "Term,Definition,Notes\nt,d,n\n"))

        store.delete_column(2)

        assert (store.term_column, store.definition_column) == (0, 1)

    def test_save_writes_naive_serialization(self, store, write_deck):
        path = write_deck("deck.csv", "Term,Definition\na,b,\n")
        store.load_from_path(path)
        store.set_cell(0, 1, "b, c")

        assert store.save_table()

        assert path.read_text(encoding="utf-8") == "Term,Definition\na,b, c\n"
        assert not store.is_dirty

    def test_save_failure_keeps_dirty_flag(self, store, animals_csv, tmp_path):
        store.load_from_path(animals_csv)
        store.set_cell(0, 1, "changed")
        store._repository.path = tmp_path / "missing-dir" / "animals.csv"

        assert not store.save_table()

        assert store.is_dirty
        assert store.error_message.startswith("Failed to save CSV:")

    def test_save_and_generate_rebuilds_cards(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.enter_setup_mode()
        store.set_cell(0, 0, "kitten")

        assert store.save_and_generate()

        assert store.all_cards[0].term == "kitten"
        assert not store.is_setup_mode

    def test_needs_save_prompt_only_with_edits_in_setup_mode(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.enter_setup_mode()
        assert not store.needs_save_prompt

        store.add_row()
        assert store.needs_save_prompt

    def test_discard_changes_reloads_file(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.enter_setup_mode()
        store.set_cell(0, 0, "kitten")

        store.discard_changes()

        assert store.table.rows[0][0] == "cat"
        assert not store.is_dirty
        assert not store.is_setup_mode

    def test_discard_after_column_delete_restores_mapping(self, store, write_deck):
        store.load_from_path(write_deck("deck.csv", "Extra,Word,Meaning\nx,cat,a feline\n"))
        store.enter_setup_mode()
        assert (store.term_column, store.definition_column) == (0, 1)

        store.delete_column(0)
        store.discard_changes()
        store.save_and_generate()

        assert store.table.headers == ["Extra", "Word", "Meaning"]
        assert (store.term_column, store.definition_column) == (0, 1)
        assert [(c.term, c.definition) for c in store.all_cards] == [("x", "cat")]

    def test_saved_column_delete_is_not_undone_by_later_discard(self, store, write_deck):
        path = write_deck("deck.csv", "Notes,Term,Definition\nn,t,d\n")
        store.load_from_path(path)
        store.enter_setup_mode()
        store.delete_column(0)
        store.save_table()
        store.set_cell(0, 0, "edited")

        store.discard_changes()

        assert store.table.headers == ["Term", "Definition"]
        assert (store.term_column, store.definition_column) == (0, 1)


class TestNavigation:
    def test_next_advances_and_clears_card_state(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.flip()
        assert store.is_flipped

        store.next_card()

        assert store.current_index == 1
        assert not store.is_flipped

    def test_next_at_last_card_restarts_session(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.reveal_all()
        for _ in range(len(store.active_cards) - 1):
            store.next_card()
        assert store.current_index == 4

        store.next_card()

        assert store.current_index == 0
        assert store.revealed_card_ids == set()

    def test_previous_is_clamped_at_zero(self, store, animals_csv):
        store.load_from_path(animals_csv)

        store.previous_card()
        assert store.current_index == 0

        store.next_card()
        store.next_card()
        store.previous_card()
        assert store.current_index == 1

    def test_flip_ignored_in_typing_mode(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.toggle_typing_mode()

        store.flip()

        assert not store.is_flipped

    def test_current_card_none_without_cards(self, store):
        assert store.current_card is None
        store.next_card()
        store.previous_card()
        assert store.current_index == 0


class TestShuffleAndOrder:
    def test_shuffle_active_leaves_list_order_alone(self, store, animals_csv):
        store.load_from_path(animals_csv)
        list_before = keys(store.list_mode_cards)
        store.next_card()

        store.shuffle_active()

        assert keys(store.list_mode_cards) == list_before
        assert sorted(keys(store.active_cards)) == sorted(list_before)
        assert store.current_index == 0
        assert store.saved_order is None

    def test_shuffle_list_mode_mirrors_and_saves_order(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.reveal_all()

        store.shuffle_list_mode()

        assert keys(store.active_cards) == keys(store.list_mode_cards)
        assert store.saved_order == keys(store.list_mode_cards)
        assert store.revealed_card_ids == set()
        assert store.current_index == 0

    def test_saved_order_survives_reload(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.shuffle_list_mode()
        shuffled = keys(store.list_mode_cards)

        store.load_from_path(animals_csv)

        assert keys(store.all_cards) == shuffled
        assert keys(store.list_mode_cards) == shuffled

    def test_saved_order_survives_restart(self, settings, import_dir, animals_csv):
        first = StudySessionStore(settings, import_dir=import_dir, rng=random.Random(3))
        first.load_from_path(animals_csv)
        first.shuffle_list_mode()
        first.persist()
        shuffled = keys(first.list_mode_cards)

        second = StudySessionStore(settings, import_dir=import_dir)
        second.restore()

        assert second.deck_path == str(animals_csv)
        assert keys(second.list_mode_cards) == shuffled

    def test_cards_missing_from_saved_order_are_appended(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.shuffle_list_mode()
        shuffled = keys(store.list_mode_cards)
        with open(animals_csv, "a", encoding="utf-8") as f:
            f.write("ant,an insect\n")

        store.load_from_path(animals_csv)

        assert keys(store.all_cards) == shuffled + ["ant|an insect"]

    def test_saved_keys_no_longer_in_deck_are_ignored(self, store, write_deck):
        path = write_deck("deck.csv", "Term,Definition\na,1\nb,2\nc,3\n")
        store._custom_orders[str(path)] = ["c|3", "gone|x", "a|1"]

        store.load_from_path(path)

        assert keys(store.all_cards) == ["c|3", "a|1", "b|2"]

    def test_reset_list_order_restores_import_order(self, store, animals_csv):
        store.load_from_path(animals_csv)
        original = keys(store.all_cards)
        store.shuffle_list_mode()

        store.reset_list_order()

        assert keys(store.list_mode_cards) == original
        assert keys(store.active_cards) == original
        assert store.saved_order is None

        store.load_from_path(animals_csv)
        assert keys(store.all_cards) == original


class TestFavorites:
    def test_toggle_star_twice_restores_state(self, store, animals_csv):
        store.load_from_path(animals_csv)
        card = store.all_cards[0]

        store.toggle_star(card.uuid)
        assert store.is_starred(card)
        assert store.starred_card_keys == {"cat|a feline"}
        assert len(store.starred_cards) == 1
        assert store.starred_cards[0].uuid != card.uuid

        store.toggle_star(card.uuid)
        assert store.starred_card_keys == set()
        assert store.starred_cards == []

    def test_star_matches_content_not_identity(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.toggle_star(store.all_cards[0].uuid)

        store.regenerate_cards()

        assert store.is_starred(store.all_cards[0])

    def test_toggle_star_unknown_id(self, store, animals_csv):
        store.load_from_path(animals_csv)

        assert not store.toggle_star("no-such-id")
        assert store.starred_card_keys == set()

    def test_enter_favorites_without_stars_is_noop(self, store, animals_csv):
        store.load_from_path(animals_csv)

        store.enter_favorites()

        assert not store.studying_favorites
        assert store.current_deck_name == "animals"

    def test_exit_favorites_keeps_position_within_deck(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.next_card()
        store.next_card()
        store.toggle_star(store.all_cards[0].uuid)
        store.toggle_star(store.all_cards[1].uuid)
        store.enter_favorites()
        store.next_card()

        store.exit_favorites()

        assert store.current_index == 1
        assert store.current_card.term == "dog"

    def test_enter_and_exit_favorites(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.toggle_star(store.all_cards[1].uuid)
        store.toggle_star(store.all_cards[3].uuid)
        store.shuffle_active()
        deck_active = list(store.active_cards)
        deck_all = list(store.all_cards)
        store.reveal_all()

        store.enter_favorites()

        assert store.studying_favorites
        assert store.current_deck_name == "Favorites"
        assert terms(store.active_cards) == ["dog", "owl"]
        assert store.all_cards == store.list_mode_cards == store.active_cards
        assert store.revealed_card_ids == set()
        assert store.current_index == 0

        store.exit_favorites()

        assert not store.studying_favorites
        assert store.current_deck_name == "animals"
        assert store.active_cards == deck_active
        assert store.all_cards == deck_all
        assert store.deck_path == str(animals_csv)

    def test_reentering_favorites_keeps_first_snapshot(self, store, animals_csv):
        store.load_from_path(animals_csv)
        deck_all = list(store.all_cards)
        store.toggle_star(deck_all[0].uuid)

        store.enter_favorites()
        store.enter_favorites()
        store.exit_favorites()

        assert store.all_cards == deck_all

    def test_exit_without_snapshot_only_leaves_mode(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.exit_favorites()

        assert not store.studying_favorites
        assert store.current_deck_name == "animals"

    def test_favorites_shuffle_does_not_save_deck_order(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.toggle_star(store.all_cards[0].uuid)
        store.toggle_star(store.all_cards[1].uuid)
        store.enter_favorites()

        store.shuffle_list_mode()

        assert store.saved_order is None

    def test_starred_cards_persist(self, settings, import_dir, animals_csv):
        first = StudySessionStore(settings, import_dir=import_dir)
        first.load_from_path(animals_csv)
        first.toggle_star(first.all_cards[2].uuid)
        first.persist()

        assert settings.get(STARRED_CARDS) == [{"term": "cow", "definition": "a bovine"}]

        second = StudySessionStore(settings, import_dir=import_dir)
        second.restore()
        assert second.starred_card_keys == {"cow|a bovine"}
        assert [card.key for card in second.starred_cards] == ["cow|a bovine"]


class TestListMode:
    def test_reveal_toggle_all_and_clear(self, store, animals_csv):
        store.load_from_path(animals_csv)
        card = store.list_mode_cards[0]

        store.toggle_reveal(card.uuid)
        assert store.is_revealed(card)
        store.toggle_reveal(card.uuid)
        assert not store.is_revealed(card)

        store.reveal_all()
        assert store.revealed_card_ids == {c.uuid for c in store.list_mode_cards}

        store.clear_all_reveals()
        assert store.revealed_card_ids == set()

    def test_reveals_reset_on_regenerate(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.reveal_all()

        store.regenerate_cards()

        assert store.revealed_card_ids == set()

    def test_search_is_case_insensitive_and_non_destructive(self, store, animals_csv):
        store.load_from_path(animals_csv)

        store.set_search_query("FEL")
        assert terms(store.filtered_list_cards) == ["cat"]

        store.set_search_query("a b")
        assert terms(store.filtered_list_cards) == ["cow", "owl"]

        assert len(store.list_mode_cards) == 5
        store.set_search_query("")
        assert len(store.filtered_list_cards) == 5


class TestTypedAnswers:
    def test_answer_matches_definition_when_term_first(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.toggle_typing_mode()

        assert store.set_typing_input("  A Feline ")
        assert store.is_correct
        assert not store.set_typing_input("a felin")
        assert not store.is_correct

    def test_answer_matches_term_when_definition_first(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.set_term_first(False)

        assert store.set_typing_input("CAT")
        assert not store.set_typing_input("a feline")

    def test_moving_on_clears_typed_answer(self, store, animals_csv):
        store.load_from_path(animals_csv)
        store.set_typing_input("a feline")

        store.next_card()

        assert store.typing_input == ""
        assert not store.is_correct

    def test_no_card_is_never_correct(self, store):
        assert not store.set_typing_input("")


class TestImport:
    def test_unsupported_extension(self, store, animals_csv, write_deck):
        store.load_from_path(animals_csv)
        doc = write_deck("notes.pdf", "Term,Definition\na,b\n")

        assert not store.import_file(doc)

        assert store.error_message == "Unsupported file type: pdf. Please use CSV."
        assert store.deck_path == str(animals_csv)

    def test_import_copies_and_opens_setup(self, store, write_deck, import_dir):
        source = write_deck("spanish.TXT", "Term,Definition\nhola,hello\n")

        assert store.import_file(source)

        copied = import_dir / "spanish.TXT"
        assert copied.read_text(encoding="utf-8") == source.read_text(encoding="utf-8")
        assert store.deck_path == str(copied)
        assert store.is_setup_mode
        assert terms(store.all_cards) == ["hola"]

    def test_import_replaces_same_named_file(self, store, write_deck, import_dir, tmp_path):
        import_dir.mkdir()
        (import_dir / "deck.csv").write_text("Old,Stuff\nx,y\n", encoding="utf-8")
        source = write_deck("deck.csv", "Term,Definition\nnew,card\n")

        store.import_file(source)

        assert store.table.headers == ["Term", "Definition"]

    def test_import_of_missing_file_reports_failure(self, store, tmp_path):
        assert not store.import_file(tmp_path / "ghost.csv")
        assert store.error_message.startswith("Failed to import file:")


class TestDeckLibraryAndSettings:
    def test_reopening_a_deck_does_not_move_it(self, store, write_deck):
        first = write_deck("first.csv", "Term,Definition\na,b\n")
        second = write_deck("second.csv", "Term,Definition\nc,d\n")
        store.load_from_path(first)
        store.load_from_path(second)

        store.load_from_path(first)

        assert [deck.path for deck in store.recent_decks] == [str(second), str(first)]

    def test_rename_survives_reopen(self, store, animals_csv, write_deck):
        store.load_from_path(animals_csv)
        store.rename_current_deck("Zoo")
        store.load_from_path(write_deck("other.csv", "Term,Definition\na,b\n"))

        store.load_from_path(animals_csv)

        assert store.current_deck_name == "Zoo"

    def test_delete_open_deck_resets_store(self, store, animals_csv):
        store.load_from_path(animals_csv)

        store.delete_deck(str(animals_csv))

        assert store.recent_decks == []
        assert store.deck_path == ""
        assert store.all_cards == []
        assert not store.has_deck

    def test_theme(self, store, settings):
        assert not store.set_theme("Neon")
        assert store.set_theme("Teal")
        store.persist()

        assert settings.get(THEME_NAME) == "Teal"
        assert store.theme["accent"]

    def test_persist_writes_only_changed_keys(self, store, settings, animals_csv):
        settings.set(CUSTOM_CARD_ORDERS, {"elsewhere.csv": ["x|y"]})
        store.load_from_path(animals_csv)

        store.persist()

        assert settings.get(CUSTOM_CARD_ORDERS) == {"elsewhere.csv": ["x|y"]}
        assert settings.get("LAST_DECK_PATH") == str(animals_csv)
        assert not store.has_pending_changes

    def test_restore_skips_missing_last_deck(self, settings, import_dir, tmp_path):
        settings.set("LAST_DECK_PATH", str(tmp_path / "deleted.csv"))
        store = StudySessionStore(settings, import_dir=import_dir)

        store.restore()

        assert store.deck_path == ""
        assert store.error_message is None

    def test_restore_ignores_values_of_the_wrong_type(self, tmp_path, import_dir):
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(
            json.dumps({"CUSTOM_CARD_ORDERS": [], "STARRED_CARD_KEYS": "abc", "THEME_NAME": 3}),
            encoding="utf-8",
        )
        SettingsManager.reset_instance()
        try:
            store = StudySessionStore(SettingsManager(str(settings_path)), import_dir=import_dir)
            store.restore()
        finally:
            SettingsManager.reset_instance()

        assert store.starred_card_keys == set()
        assert store.saved_order is None
        assert store.theme_name == "Blue"


class TestChangeNotification:
    def test_callbacks_run_after_mutations(self, store, animals_csv):
        calls = []
        store.on_change(lambda: calls.append(store.current_index))
        store.load_from_path(animals_csv)

        store.next_card()

        assert calls[-1] == 1

    def test_failing_callback_does_not_break_mutation(self, store, animals_csv):
        def boom():
            raise RuntimeError("listener bug")

        store.on_change(boom)

        assert store.load_from_path(animals_csv)
        assert len(store.all_cards) == 5


def test_card_identity_and_key():
    a = Card("cat", "a feline")
    b = Card("cat", "a feline")

    assert a.key == b.key == "cat|a feline"
    assert a != b
    assert a.copy().key == a.key
    assert a.copy().uuid != a.uuid


def test_store_without_settings_backend(animals_csv, import_dir):
    store = StudySessionStore(import_dir=import_dir)
    store.load_from_path(animals_csv)
    store.toggle_star(store.all_cards[0].uuid)

    store.persist()
    store.restore()

    assert not store.has_pending_changes
    assert store.favorites_count == 1


@pytest.mark.parametrize("query,expected", [("OWL", ["owl"]), ("bird", ["owl"]), ("zzz", [])])
def test_filter_matches_either_field(store, animals_csv, query, expected):
    store.load_from_path(animals_csv)
    store.search_query = query

    assert terms(store.filtered_list_cards) == expected
