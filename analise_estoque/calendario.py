# analise_estoque/calendario.py
"""
Calendário comercial com feriados nacionais brasileiros.

Duas definições de dia útil convivem neste módulo:

- **Aprovação**: segunda a sexta, exceto feriados. Usada para ajustar a data
  de aprovação de um pedido para o próximo dia útil.
- **Faturamento**: segunda a sábado, exceto feriados. Usada para contar os
  dias úteis decorridos entre aprovação e faturamento.

Os feriados móveis (Carnaval, Sexta-feira Santa, Corpus Christi) vêm de uma
tabela finita por ano. Anos fora da tabela não têm feriados móveis; a Páscoa
não é calculada.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

DOMINGO = 6
SABADO = 5

# Máscaras de semana do numpy (segunda ... domingo)
SEMANA_APROVACAO = '1111100'
SEMANA_FATURAMENTO = '1111110'


@dataclass(frozen=True)
class FeriadoFixo:
    """Feriado que se repete todo ano no mesmo dia."""
    mes: int
    dia: int
    nome: str


@dataclass(frozen=True)
class DadosCalendario:
    """Provedor de dados de feriados (fixos + tabela de móveis por ano)."""
    feriados_fixos: Tuple[FeriadoFixo, ...]
    feriados_moveis: Mapping[int, Mapping[date, str]] = field(default_factory=dict)


FERIADOS_FIXOS = (
    FeriadoFixo(1, 1, 'Confraternização Universal'),
    FeriadoFixo(4, 21, 'Tiradentes'),
    FeriadoFixo(5, 1, 'Dia do Trabalho'),
    FeriadoFixo(9, 7, 'Independência do Brasil'),
    FeriadoFixo(10, 12, 'Nossa Senhora Aparecida'),
    FeriadoFixo(11, 2, 'Finados'),
    FeriadoFixo(11, 15, 'Proclamação da República'),
    FeriadoFixo(12, 25, 'Natal'),
)

FERIADOS_MOVEIS = {
    2024: {
        date(2024, 2, 12): 'Carnaval (segunda)',
        date(2024, 2, 13): 'Carnaval (terça)',
        date(2024, 3, 29): 'Sexta-feira Santa',
        date(2024, 5, 30): 'Corpus Christi',
    },
    2025: {
        date(2025, 3, 3): 'Carnaval (segunda)',
        date(2025, 3, 4): 'Carnaval (terça)',
        date(2025, 4, 18): 'Sexta-feira Santa',
        date(2025, 6, 19): 'Corpus Christi',
    },
    2026: {
        date(2026, 2, 16): 'Carnaval (segunda)',
        date(2026, 2, 17): 'Carnaval (terça)',
        date(2026, 4, 3): 'Sexta-feira Santa',
        date(2026, 6, 4): 'Corpus Christi',
    },
    2027: {
        date(2027, 2, 8): 'Carnaval (segunda)',
        date(2027, 2, 9): 'Carnaval (terça)',
        date(2027, 3, 26): 'Sexta-feira Santa',
        date(2027, 5, 27): 'Corpus Christi',
    },
}

FERIADOS_NACIONAIS = DadosCalendario(FERIADOS_FIXOS, FERIADOS_MOVEIS)


class CalendarioComercial:
    """
    Responde se uma data é feriado, fim de semana ou dia útil.

    O cache de feriados por ano pertence à instância; cada análise pode
    criar o seu próprio calendário.
    """

    def __init__(self, dados: DadosCalendario = FERIADOS_NACIONAIS):
        self.dados = dados
        self._cache: Dict[int, Dict[date, str]] = {}

    def feriados_do_ano(self, ano: int) -> Dict[date, str]:
        """Retorna {data: nome} com os feriados fixos e móveis do ano."""
        if ano not in self._cache:
            feriados = {
                date(ano, f.mes, f.dia): f.nome for f in self.dados.feriados_fixos
            }
            moveis = self.dados.feriados_moveis.get(ano)
            if moveis:
                feriados.update(moveis)
            else:
                logger.warning(
                    "Sem tabela de feriados moveis para %s; apenas feriados fixos considerados",
                    ano,
                )
            self._cache[ano] = feriados
        return self._cache[ano]

    def nome_feriado(self, data: date) -> Optional[str]:
        return self.feriados_do_ano(data.year).get(data)

    def is_feriado(self, data: date) -> bool:
        return data in self.feriados_do_ano(data.year)

    def is_domingo(self, data: date) -> bool:
        return data.weekday() == DOMINGO

    def is_sabado(self, data: date) -> bool:
        return data.weekday() == SABADO

    def is_fim_de_semana(self, data: date) -> bool:
        return data.weekday() in (SABADO, DOMINGO)

    def is_dia_util_aprovacao(self, data: date) -> bool:
        """Segunda a sexta, exceto feriados."""
        return not self.is_fim_de_semana(data) and not self.is_feriado(data)

    def is_dia_util_faturamento(self, data: date) -> bool:
        """Segunda a sábado, exceto feriados."""
        return not self.is_domingo(data) and not self.is_feriado(data)

    def feriados_entre(self, inicio: date, fim: date) -> np.ndarray:
        """Feriados dos anos de ``inicio`` a ``fim`` como datetime64[D]."""
        feriados = []
        for ano in range(inicio.year, fim.year + 1):
            feriados.extend(self.feriados_do_ano(ano))
        return np.array(sorted(feriados), dtype='datetime64[D]')

    def proximo_dia_util(self, data: date) -> date:
        """
        Retorna ``data`` se já for dia útil de aprovação; senão o próximo
        dia útil de aprovação.
        """
        # Uma semana cobre qualquer sequência de fim de semana + feriados
        feriados = self.feriados_entre(data, data + timedelta(days=7))
        resultado = np.busday_offset(
            np.datetime64(data, 'D'), 0, roll='forward',
            weekmask=SEMANA_APROVACAO, holidays=feriados,
        )
        return resultado.item()

    def dias_uteis_entre(self, inicio: date, fim: date) -> int:
        """
        Conta os dias úteis de faturamento em (inicio, fim].

        A data inicial não entra na contagem; a final entra. Retorna 0 quando
        ``fim <= inicio``.
        """
        if fim <= inicio:
            return 0
        dias = np.busday_count(
            np.datetime64(inicio + timedelta(days=1), 'D'),
            np.datetime64(fim + timedelta(days=1), 'D'),
            weekmask=SEMANA_FATURAMENTO,
            holidays=self.feriados_entre(inicio, fim),
        )
        return max(0, int(dias))
