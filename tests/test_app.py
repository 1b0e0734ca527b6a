import json
import unittest

from app import app as flask_app
from app import MAX_DEPTH, board_from_json, board_to_json
from game import Board, Side


def _post(client, path, payload):
    return client.post(path, data=json.dumps(payload), content_type="application/json")


class TestBoardJson(unittest.TestCase):
    def test_given_board_when_roundtrip_json_then_equal(self):
        b = Board(3)
        b.add_spot(Side.RED, 2, 2)
        b.add_spot(Side.BLUE, 1, 1)
        bj = board_to_json(b)
        self.assertEqual(bj["size"], 3)
        self.assertEqual(bj["cells"][0], [2, "b"])
        self.assertEqual(bj["cells"][4], [2, "r"])
        self.assertEqual(bj["cells"][8], [1, "-"])
        back = board_from_json(bj)
        self.assertEqual(back, b)
        self.assertEqual(back.num_moves, 0)

    def test_given_malformed_boards_when_parsing_then_value_error(self):
        for bad in (
            None,
            {"size": 2},
            {"size": 1, "cells": [[1, "-"]]},
            {"size": 2, "cells": [[1, "-"]] * 3},
            {"size": 2, "cells": [[1, "x"]] * 4},
            {"size": 2, "cells": [[-1, "r"]] * 4},
        ):
            with self.assertRaises(ValueError):
                board_from_json(bad)


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self.client = flask_app.test_client()

    def test_given_new_game_when_posted_then_empty_board_and_all_moves_legal(self):
        r = _post(self.client, "/api/new", {"size": 3})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["toMove"], "r")
        self.assertIsNone(d["winner"])
        self.assertEqual(len(d["legalMoves"]), 9)
        self.assertEqual(d["board"]["cells"], [[1, "-"]] * 9)
        self.assertTrue(d["dump"].startswith("===\n"))

        r2 = _post(self.client, "/api/legal", {"board": d["board"]})
        self.assertEqual(r2.status_code, 200)
        self.assertEqual(r2.get_json()["legalMoves"], d["legalMoves"])

    def test_given_bad_size_when_new_then_400(self):
        for size in (1, 99, "big"):
            r = _post(self.client, "/api/new", {"size": size})
            self.assertEqual(r.status_code, 400)
            self.assertFalse(r.get_json()["ok"])

    def test_given_human_move_when_posted_then_next_board_or_400_if_illegal(self):
        board = _post(self.client, "/api/new", {"size": 3}).get_json()["board"]
        r = _post(self.client, "/api/move", {"board": board, "move": [1, 1]})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["side"], "r")
        self.assertEqual(d["board"]["cells"][0], [2, "r"])
        self.assertEqual(d["toMove"], "b")

        # BLUE may not add to RED's square
        r2 = _post(self.client, "/api/move", {"board": d["board"], "move": [1, 1]})
        self.assertEqual(r2.status_code, 400)
        d2 = r2.get_json()
        self.assertEqual(d2["error"], "Illegal move")
        self.assertEqual(d2["detail"]["code"], "ILLEGAL_MOVE")
        self.assertEqual(len(d2["legalMoves"]), 8)

        r3 = _post(self.client, "/api/move", {"board": d["board"], "move": "nope"})
        self.assertEqual(r3.status_code, 400)

    def test_given_position_when_ai_called_then_legal_move_applied(self):
        board = _post(self.client, "/api/new", {"size": 3}).get_json()["board"]
        after_human = _post(self.client, "/api/move", {"board": board, "move": [2, 2]}).get_json()
        r = _post(self.client, "/api/ai", {"board": after_human["board"], "depth": 2})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["side"], "b")
        self.assertIn(d["move"], after_human["legalMoves"])
        self.assertEqual(d["toMove"], "r")
        placed = board_from_json(d["board"])
        mr, mc = d["move"]
        self.assertIs(placed.get(mr, mc).owner, Side.BLUE)

    def test_given_finished_game_when_ai_called_then_400(self):
        won = {"size": 2, "cells": [[1, "r"]] * 4}
        r = _post(self.client, "/api/ai", {"board": won})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["winner"], "r")

    def test_given_bad_depth_or_board_when_ai_called_then_400(self):
        board = _post(self.client, "/api/new", {"size": 2}).get_json()["board"]
        self.assertEqual(_post(self.client, "/api/ai", {"board": board, "depth": 0}).status_code, 400)
        self.assertEqual(_post(self.client, "/api/ai", {"board": board, "depth": "x"}).status_code, 400)
        self.assertEqual(_post(self.client, "/api/ai", {"board": {"size": 2}}).status_code, 400)

    def test_given_overfull_corner_board_when_ai_searches_deeper_then_200_and_red_moved(self):
        board = {"size": 2, "cells": [[3, "r"], [1, "-"], [1, "-"], [1, "-"]]}
        r = _post(self.client, "/api/ai", {"board": board, "depth": 2})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["side"], "r")
        placed = board_from_json(d["board"])
        mr, mc = d["move"]
        self.assertIs(placed.get(mr, mc).owner, Side.RED)

    def test_given_depth_above_limit_when_ai_called_then_400(self):
        board = _post(self.client, "/api/new", {"size": 16}).get_json()["board"]
        r = _post(self.client, "/api/ai", {"board": board, "depth": MAX_DEPTH + 1})
        self.assertEqual(r.status_code, 400)
        self.assertIn(str(MAX_DEPTH), r.get_json()["error"])

    def test_given_stuck_position_when_ai_called_then_500(self):
        # Every white square is full, so the side to move has nothing to play.
        stuck = {"size": 2, "cells": [[2, "-"], [2, "-"], [2, "-"], [2, "-"]]}
        r = _post(self.client, "/api/ai", {"board": stuck})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.get_json()["detail"]["code"], "NO_LEGAL_MOVE")


if __name__ == "__main__":
    unittest.main(verbosity=2)
