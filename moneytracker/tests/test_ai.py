# tests/test_ai.py
import unittest
from unittest.mock import patch, MagicMock
from moneytracker.core import ai
import datetime


class TestArtificialIntelligence(unittest.TestCase):

    def setUp(self):
        self.today = datetime.date(2025, 7, 7)
        self.today_str = self.today.strftime("%Y-%m-%d")
        self.yesterday_str = (self.today - datetime.timedelta(days=1)).strftime("%Y-%m-%d")

    @patch('moneytracker.core.ai.genai.GenerativeModel')
    def test_ask_gemini_success(self, mock_model_class):
        mock_response = MagicMock()
        mock_response.parts = ["parte"]
        mock_response.text = '  {"intencao": "mostrar_resumo"}  '
        mock_model_class.return_value.generate_content.return_value = mock_response

        self.assertEqual(ai.ask_gemini("Olá"), '{"intencao": "mostrar_resumo"}')
        mock_model_class.assert_called_once_with(model_name=ai.GEMINI_MODEL, safety_settings=ai.safety_settings)

    @patch('moneytracker.core.ai.genai.GenerativeModel')
    def test_ask_gemini_blocked_response(self, mock_model_class):
        mock_response = MagicMock()
        mock_response.parts = []
        mock_model_class.return_value.generate_content.return_value = mock_response
        self.assertIsNone(ai.ask_gemini("Olá"))

    @patch('moneytracker.core.ai.genai.GenerativeModel')
    def test_ask_gemini_failure(self, mock_model_class):
        mock_model_class.return_value.generate_content.side_effect = Exception("quota exceeded")
        self.assertIsNone(ai.ask_gemini("Olá"))

    # --- Testes para extract_transaction_info ---
    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_expense(self, mock_ask_gemini):
        mock_ask_gemini.return_value = (
            f'```json\n{{"intencao": "transacao", "tipo": "expense", "valor": 50.0, '
            f'"categoria": "Alimentação", "memo": "Mercado", "data": "{self.today_str}"}}\n```'
        )
        info = ai.extract_transaction_info("gastei 50 no mercado", today=self.today)
        self.assertEqual(info, {
            "intencao": "transacao",
            "type": "expense",
            "amount": 50.0,
            "category": "Alimentação",
            "memo": "Mercado",
            "date": self.today_str,
        })

    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_income_with_text_amount(self, mock_ask_gemini):
        mock_ask_gemini.return_value = (
            f'{{"intencao": "transacao", "tipo": "income", "valor": "3.000,00", '
            f'"categoria": "Salário", "memo": null, "data": "{self.yesterday_str}"}}'
        )
        info = ai.extract_transaction_info("recebi meu salário de 3000 ontem", today=self.today)
        self.assertEqual(info["type"], "income")
        self.assertEqual(info["amount"], 3000.0)
        self.assertEqual(info["date"], self.yesterday_str)
        self.assertIsNone(info["memo"])

    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_defaults(self, mock_ask_gemini):
        mock_ask_gemini.return_value = '{"intencao": "transacao", "tipo": "expense", "valor": 12}'
        info = ai.extract_transaction_info("uber 12", today=self.today)
        self.assertEqual(info["category"], "Outros")
        self.assertEqual(info["date"], self.today_str)

    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_analytics_intent(self, mock_ask_gemini):
        mock_ask_gemini.return_value = '{"intencao": "mostrar_analise", "periodo": "last_month"}'
        info = ai.extract_transaction_info("gastos do mês passado", today=self.today)
        self.assertEqual(info, {"intencao": "mostrar_analise", "periodo": "last_month"})

    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_prompt_mentions_today(self, mock_ask_gemini):
        mock_ask_gemini.return_value = None
        self.assertIsNone(ai.extract_transaction_info("oi", today=self.today))
        prompt = mock_ask_gemini.call_args[0][0]
        self.assertIn(self.today_str, prompt)
        self.assertIn("Mensagem do Usuário: oi", prompt)

    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_invalid_json(self, mock_ask_gemini):
        mock_ask_gemini.return_value = '{"intencao": "transacao", "valor": }'
        self.assertIsNone(ai.extract_transaction_info("???", today=self.today))

    @patch('moneytracker.core.ai.ask_gemini')
    def test_extract_no_json(self, mock_ask_gemini):
        mock_ask_gemini.return_value = 'Não entendi.'
        self.assertIsNone(ai.extract_transaction_info("???", today=self.today))


if __name__ == '__main__':
    unittest.main()
