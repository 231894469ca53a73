"""
System prompts and prompt builders for the A-level CS tutor.
Selects the tutoring persona and phrases each request for the model.
"""

import json
from typing import Dict, List

from common.constants import (
    PERSONA_STANDARD, PERSONA_SOCRATIC, PERSONA_EXAMINER, PERSONAS,
    LANG_EN, LANG_ZH, LANGUAGES, PAPER_THEORY,
    QUIZ_QUESTION_COUNT, MOCK_PAPER_QUESTION_COUNT
)


# Cambridge 9618 pseudocode conventions
PSEUDOCODE_GUIDE = """
STRICT CAMBRIDGE 9618 PSEUDOCODE GUIDE:
- Assignment: Use '<-' (e.g., Count <- 0)
- Comparison: =, <>, >, <, >=, <=
- Logic: AND, OR, NOT
- Input/Output: INPUT x, OUTPUT "Hello"
- Selection:
  IF condition THEN ... ELSE ... ENDIF
  CASE OF variable ... value1: ... value2: ... OTHERWISE ... ENDCASE
- Iteration:
  FOR i <- 1 TO 10 ... NEXT i
  REPEAT ... UNTIL condition
  WHILE condition DO ... ENDWHILE
- Arrays: DECLARE MyArr : ARRAY[1:10] OF INTEGER
- File Handling: OPENFILE, READFILE, WRITEFILE, CLOSEFILE
- Procedures: PROCEDURE MyProc(BYVAL x : INTEGER) ... ENDPROCEDURE
- Functions: FUNCTION MyFunc() RETURNS INTEGER ... ENDFUNCTION
- Comments: // Comment
- Variables: DECLARE MyVar : STRING
ALWAYS USE THESE CONVENTIONS.
"""

CORE_SYSTEM_PROMPTS = {
    LANG_EN: """
Role Definition
You are not a simple chatbot; you are an Educational Platform Architect + Product Manager + AI Teaching Expert + System Design Lead.
Your task is to continuously build an intelligent learning platform named "A-level CS Tutor".
Follow structured learning: Concept -> Example -> Pitfall -> Practice -> Feedback.
""",
    LANG_ZH: """
角色定义
你不是普通回答机器人，你是 教育平台架构师 + 产品经理 + AI 教学专家 + 系统设计主管。
你的任务是持续构建一个名为 A-level CS Tutor 的智能学习平台。
遵循结构化学习：概念 -> 示例 -> 误区 -> 练习 -> 反馈。
"""
}

PERSONA_STYLES = {
    PERSONA_STANDARD: {
        LANG_EN: "Provide clear explanations and practical applications.",
        LANG_ZH: "提供清晰的解释和实际应用。"
    },
    PERSONA_SOCRATIC: {
        LANG_EN: "Ask guiding questions to help students derive answers.",
        LANG_ZH: "提出引导性问题，帮助学生推导出答案。"
    },
    PERSONA_EXAMINER: {
        LANG_EN: "Assess answers using real marking scheme language.",
        LANG_ZH: "使用真实的评分标准语言评估答案。"
    }
}

PERSONA_PROMPTS: Dict[str, Dict[str, str]] = {
    persona: {
        lang: f"{CORE_SYSTEM_PROMPTS[lang]} {styles[lang]}"
        for lang in LANGUAGES
    }
    for persona, styles in PERSONA_STYLES.items()
}

# Every persona needs a prompt in every language
for _persona in PERSONAS:
    for _lang in LANGUAGES:
        if not PERSONA_PROMPTS.get(_persona, {}).get(_lang, '').strip():
            raise RuntimeError(f"Missing system prompt for {_persona}/{_lang}")

RESPONSE_LANGUAGE = {
    LANG_EN: "Write all text in English.",
    LANG_ZH: "所有文字请使用简体中文。"
}


def _check_language(language: str):
    if language not in LANGUAGES:
        raise ValueError(f"Unknown language: {language}")


def get_persona_prompt(persona: str, language: str) -> str:
    """
    Look up the system prompt for a tutoring persona.

    Args:
        persona: One of standard, socratic, examiner
        language: 'en' or 'zh'

    Returns:
        System instruction text
    """
    _check_language(language)
    if persona not in PERSONA_PROMPTS:
        raise ValueError(f"Unknown persona: {persona}")
    return PERSONA_PROMPTS[persona][language]


def get_core_prompt(language: str) -> str:
    """System prompt without persona styling"""
    _check_language(language)
    return CORE_SYSTEM_PROMPTS[language]


def build_history_block(history: List[str]) -> str:
    """Join prior turns into one text block; empty history gives ''"""
    if not history:
        return ""
    joined = "\n".join(history)
    return f"History:\n{joined}\n"


def build_quiz_prompt(topics: List[str], language: str) -> str:
    _check_language(language)
    return (f"Generate {QUIZ_QUESTION_COUNT} multiple-choice questions for A-Level CS 9618 "
            f"about: {', '.join(topics)}. Each question has exactly 4 options and "
            f"correctIndex is the 0-based index of the right option. "
            f"{RESPONSE_LANGUAGE[language]} Return JSON.")


def build_grading_prompt(text: str) -> str:
    return f"Grade submission for 9618: {text}"


def build_code_analysis_prompt(code: str, code_language: str) -> str:
    prompt = f"Analyze {code_language} code for logic and Big O. Code: {code}"
    if code_language.lower() == 'pseudocode':
        prompt += f"\n{PSEUDOCODE_GUIDE}"
    return prompt


def build_mock_paper_prompt(paper_type: str, language: str) -> str:
    _check_language(language)
    if paper_type == PAPER_THEORY:
        return (f"Generate a mini Mock Exam for Cambridge 9618 Theory. "
                f"{MOCK_PAPER_QUESTION_COUNT} questions. "
                f"{RESPONSE_LANGUAGE[language]} JSON.")
    return (f"Generate a mini Mock Exam for Cambridge 9618 Coding. "
            f"{MOCK_PAPER_QUESTION_COUNT} questions. Any algorithm must be "
            f"written in 9618 pseudocode.\n{PSEUDOCODE_GUIDE}\n"
            f"{RESPONSE_LANGUAGE[language]} JSON.")


def build_mock_grading_prompt(paper: Dict, answers: Dict[int, str], language: str) -> str:
    """
    Embed the paper and the student's answers as JSON.

    Args:
        paper: Paper in its to_dict() form
        answers: Question id to answer text
        language: Language for the feedback
    """
    _check_language(language)
    answers_json = json.dumps({str(k): v for k, v in answers.items()}, ensure_ascii=False)
    paper_json = json.dumps(paper, ensure_ascii=False)
    return (f"Grade this 9618 Mock Exam. Paper: {paper_json}. Answers: {answers_json}. "
            f"{RESPONSE_LANGUAGE[language]} JSON response.")
