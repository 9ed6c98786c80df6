import numpy as np
import pandas as pd

from sklearn.linear_model import LogisticRegression
from sklearn.tree import DecisionTreeClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.model_selection import train_test_split, cross_val_score
from sklearn.metrics import accuracy_score, confusion_matrix, classification_report

from gang_network.config import (
    CLASSIFIER_FEATURES, CLASSIFIER_TARGET, TEST_SIZE, RANDOM_STATE, TREE_MAX_DEPTH, BIRTHPLACES,
)


def build_design_matrix(persons, feature_columns=CLASSIFIER_FEATURES, target=CLASSIFIER_TARGET):
    """
    Features and target for the classifiers.

    Birthplace is a category code, so it is one-hot encoded; every other
    feature is used as is.
    """
    missing = [col for col in list(feature_columns) + [target] if col not in persons.columns]
    if missing:
        raise ValueError(f"Columns not found in person table: {missing}")

    X = persons[list(feature_columns)].copy()
    if 'Birthplace' in X.columns:
        birthplace = pd.Categorical(X.pop('Birthplace'), categories=sorted(BIRTHPLACES))
        dummies = pd.get_dummies(birthplace, prefix='Birthplace').astype(int)
        dummies.index = X.index
        X = pd.concat([X, dummies], axis=1)
    X = X.astype(float)
    y = persons[target].astype(int)

    return X, y


def _split(X, y, test_size, random_state):
    counts = y.value_counts()
    if len(counts) < 2:
        raise ValueError(f"Target '{y.name}' has a single class; nothing to classify")
    stratify = y if counts.min() >= 2 else None
    return train_test_split(X, y, test_size=test_size, random_state=random_state, stratify=stratify)


def _evaluate(model, X, y, X_test, y_test):
    y_pred = model.predict(X_test)
    n_splits = min(5, int(y.value_counts().min()))
    if n_splits >= 2:
        cv_scores = cross_val_score(model, X, y, cv=n_splits, scoring='accuracy')
        cv_accuracy = float(np.mean(cv_scores))
    else:
        cv_accuracy = float('nan')

    return {
        'model': model,
        'accuracy': accuracy_score(y_test, y_pred),
        'confusion_matrix': confusion_matrix(y_test, y_pred, labels=sorted(y.unique())),
        'report': classification_report(y_test, y_pred, zero_division=0),
        'cv_accuracy': cv_accuracy,
        'n_train': len(y) - len(y_test),
        'n_test': len(y_test),
    }


def fit_logistic_regression(X, y, test_size=TEST_SIZE, random_state=RANDOM_STATE):
    X_train, X_test, y_train, y_test = _split(X, y, test_size, random_state)
    model = Pipeline(
        steps=[
            ('scaler', StandardScaler()),
            ('clf', LogisticRegression(max_iter=2000, solver='lbfgs')),
        ]
    )
    model.fit(X_train, y_train)

    result = _evaluate(model, X, y, X_test, y_test)
    # coefficients are on the standardized scale
    result['coefficients'] = pd.Series(model.named_steps['clf'].coef_[0], index=X.columns).sort_values(
        key=np.abs, ascending=False)
    return result


def fit_decision_tree(X, y, max_depth=TREE_MAX_DEPTH, test_size=TEST_SIZE, random_state=RANDOM_STATE):
    X_train, X_test, y_train, y_test = _split(X, y, test_size, random_state)
    model = DecisionTreeClassifier(max_depth=max_depth, random_state=random_state)
    model.fit(X_train, y_train)

    result = _evaluate(model, X, y, X_test, y_test)
    result['importances'] = pd.Series(model.feature_importances_, index=X.columns).sort_values(ascending=False)
    return result
