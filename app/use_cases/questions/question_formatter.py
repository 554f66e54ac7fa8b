from typing import Optional
from app.domain.entities.markdown import sort_links
from app.domain.entities.question import Answer, Question, QuestionFormat
from app.domain.services_interfaces.markdown_service import MarkdownServiceInterface


class QuestionFormatter:
    def __init__(self, markdown_service: MarkdownServiceInterface):
        self.markdown_service = markdown_service

    def format(self, question: Question, question_format: QuestionFormat,
               learner_answers: Optional[list[int]] = None) -> Question:
        """
        Converts the question into the format the front-end asked for.

        :param question: The question as stored
        :param question_format: MARKDOWN_FULL for editing, HTML_FULL after answering, HTML_SHORT for answering
        :param learner_answers: Selected answers, used with HTML_FULL only
        :return: A new Question instance
        """
        if question_format == QuestionFormat.MARKDOWN_FULL:
            return question
        if question_format == QuestionFormat.HTML_FULL:
            return self.into_html(question, learner_answers)
        return self.without_detailed_explanations(self.into_html(question, None))

    def into_html(self, question: Question, learner_answers: Optional[list[int]]) -> Question:
        # Links are grouped by where they came from to order the refresher links
        question_links = []
        correct_links = []
        incorrect_links = []

        converted = self.markdown_service.md_to_html(question.question)
        question_links.extend(converted.links)
        question_html = converted.html

        answers = []
        for answer in question.answers:
            links = correct_links if answer.is_correct() else incorrect_links
            converted = self.markdown_service.md_to_html(answer.a)
            links.extend(converted.links)
            explanation = None
            if answer.e is not None:
                converted_e = self.markdown_service.md_to_html(answer.e)
                links.extend(converted_e.links)
                explanation = converted_e.html
            answers.append(Answer(a=converted.html, e=explanation, c=answer.c))

        # Selected answers go to the top, both groups keep their original order
        if learner_answers is not None:
            selected = [a.model_copy(update={'sel': True}) for i, a in enumerate(answers) if i in learner_answers]
            not_selected = [a for i, a in enumerate(answers) if i not in learner_answers]
            answers = selected + not_selected

        refresher_links = sort_links(question_links, correct_links, incorrect_links)

        return question.model_copy(update={
            'question': question_html,
            'answers': answers,
            'refresher_links': refresher_links or None,
        })

    @staticmethod
    def without_detailed_explanations(question: Question) -> Question:
        # Removes explanations and correct flags to show the question for answering
        answers = [a.model_copy(update={'e': None, 'c': None}) for a in question.answers]
        return question.model_copy(update={'answers': answers})
